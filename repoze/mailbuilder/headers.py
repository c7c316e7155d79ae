##############################################################################
#
# Copyright (c) 2003 Zope Corporation and Contributors.
# All Rights Reserved.
#
# This software is subject to the provisions of the Zope Public License,
# Version 2.1 (ZPL).  A copy of the ZPL should accompany this distribution.
# THIS SOFTWARE IS PROVIDED "AS IS" AND ANY AND ALL EXPRESS OR IMPLIED
# WARRANTIES ARE DISCLAIMED, INCLUDING, BUT NOT LIMITED TO, THE IMPLIED
# WARRANTIES OF TITLE, MERCHANTABILITY, AGAINST INFRINGEMENT, AND FITNESS
# FOR A PARTICULAR PURPOSE.
#
##############################################################################
import re
from types import MappingProxyType

from zope.interface import implementer
from repoze.mailbuilder.interfaces import IHeaderStore
from repoze.mailbuilder.exceptions import InvalidHeader

# RFC 5322 field-name: printable US-ASCII except colon and space
_NAME_RE = re.compile(r'^[\x21-\x39\x3b-\x7e]+$')

# Blind copies are only ever taken from the Bcc recipient list.
RESERVED = frozenset(['bcc'])


def check_header(name, value):
    if not isinstance(name, str) or not name.strip():
        raise InvalidHeader('Header name must not be empty')
    if _NAME_RE.match(name) is None:
        raise InvalidHeader('Malformed header name: %r' % name)
    if name.lower() in RESERVED:
        raise InvalidHeader('Header %s is set through the recipient lists'
                            % name)
    if not isinstance(value, str) or not value.strip():
        raise InvalidHeader('Value of header %s must not be empty' % name)
    if '\r' in value or '\n' in value:
        raise InvalidHeader('Value of header %s contains a line break' % name)


@implementer(IHeaderStore)
class HeaderStore(object):
    """Extra headers, last write wins.

    Iteration follows the order in which names were first set.
    """

    def __init__(self):
        self._headers = {}

    def set(self, name, value):
        check_header(name, value)
        self._headers[name] = value

    def update(self, headers):
        items = list(dict(headers).items())
        for name, value in items:
            check_header(name, value)
        self._headers.update(items)

    def get(self, name, default=None):
        return self._headers.get(name, default)

    def clear(self):
        self._headers.clear()

    def snapshot(self):
        return MappingProxyType(dict(self._headers))

    def view(self):
        """Live read-only view of the headers."""
        return MappingProxyType(self._headers)

    def __contains__(self, name):
        return name in self._headers

    def __iter__(self):
        return iter(self._headers)

    def __len__(self):
        return len(self._headers)
