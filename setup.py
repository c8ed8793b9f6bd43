#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Copyright (C) 2007-2009 Christopher Lenz
# All rights reserved.
#
# This software is licensed as described in the file COPYING, which
# you should have received as part of this distribution.

from setuptools import setup

setup(
    name='couchstore',
    version='0.1.0',
    description='Paginated document queries over CouchDB',
    long_description="""
    A document store on top of a CouchDB database. It turns document IDs,
    ID lists, Mango selectors and view queries into lazy iterators that page
    through the results one HTTP request at a time.""",
    license = 'BSD',
    classifiers = [
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: BSD License',
        'Operating System :: OS Independent',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3 :: Only',
        'Topic :: Database :: Front-Ends',
        'Topic :: Software Development :: Libraries :: Python Modules',
    ],
    packages = ['couchstore', 'couchstore.tests'],
    python_requires='>=3.7',
    install_requires=[
        "furl",
        "requests",
        "requests_toolbelt",
    ],
    test_suite='couchstore.tests.__main__.suite',
    zip_safe=True,
)
