import requests.exceptions
from requests_toolbelt import sessions

from couchstore import exceptions


def _error_message(response):
    """Pick the most descriptive message out of a failed CouchDB response."""
    try:
        data = response.json()
    except ValueError:
        return response.reason
    if isinstance(data, dict) and data.get('reason'):
        if data.get('error'):
            return '{error}: {reason}'.format(**data)
        return data['reason']
    return response.reason


class Session(object):
    """Wrapper around BaseUrlSession that automatically wraps certain exceptions when making requests"""

    def __init__(self, base_url=None, timeout=None):
        self._base_session = sessions.BaseUrlSession(base_url=base_url)
        self.timeout = timeout

    @property
    def base_url(self):
        return self._base_session.base_url

    @base_url.setter
    def base_url(self, url):
        self._base_session.base_url = url

    def request(self, method, url, *args, **kwargs):
        if self.timeout is not None:
            kwargs.setdefault('timeout', self.timeout)
        try:
            resp = self._base_session.request(method, str(url), *args, **kwargs)
            resp.raise_for_status()
        except requests.exceptions.HTTPError as exc:
            raise exceptions.http_error_lookup(
                exc.response.status_code, _error_message(exc.response)) from exc
        except requests.exceptions.Timeout as exc:
            raise exceptions.Timeout(str(exc)) from exc
        except requests.exceptions.RequestException as exc:
            raise exceptions.RequestsException(str(exc)) from exc
        return resp

    def head(self, url, **kwargs):
        return self.request("HEAD", url=url, **kwargs)

    def get(self, url, **kwargs):
        return self.request("GET", url=url, **kwargs)

    def put(self, url, data=None, json=None, **kwargs):
        return self.request("PUT", url=url, data=data, json=json, **kwargs)

    def post(self, url, data=None, json=None, **kwargs):
        return self.request("POST", url=url, data=data, json=json, **kwargs)

    def delete(self, url, **kwargs):
        return self.request("DELETE", url=url, **kwargs)
