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
"""
Address values and their validation.
"""

import re
from email.utils import formataddr

from zope.interface import implementer
from repoze.mailbuilder.interfaces import IAddress
from repoze.mailbuilder.interfaces import IAddressValidator
from repoze.mailbuilder.exceptions import InvalidAddress

# A practical subset of RFC 5322: no quoted local parts, no comments.
_LOCAL_PART = r'[^@\s"(),:;<>\[\\\]]+'
_LABEL = r'[^\W_](?:[\w-]*[^\W_])?'
_DOMAIN = r'(?:%s(?:\.%s)*|\[[^\[\]\s\\]+\])' % (_LABEL, _LABEL)
ADDRESS_RE = re.compile(r'^%s@%s$' % (_LOCAL_PART, _DOMAIN), re.UNICODE)


@implementer(IAddress)
class Address(object):
    """An immutable (email, personal) pair.

    Instances are only made by `AddressValidator`; use `validate`.
    """
    __slots__ = ('_email', '_personal')

    email = property(lambda self: self._email)
    personal = property(lambda self: self._personal)

    def __init__(self, email, personal=None):
        object.__setattr__(self, '_email', email)
        object.__setattr__(self, '_personal', personal)

    def __setattr__(self, name, value):
        raise AttributeError('Address is immutable')

    def __eq__(self, other):
        if not isinstance(other, Address):
            return NotImplemented
        return (self._email, self._personal) == (other._email, other._personal)

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self):
        return hash((self._email, self._personal))

    def __str__(self):
        return formataddr((self._personal, self._email))

    def __repr__(self):
        return '<Address %r>' % str(self)


@implementer(IAddressValidator)
class AddressValidator(object):

    def validate(self, raw, personal=None):
        if not isinstance(raw, str):
            raise InvalidAddress('Address must be a string, not %r' % (raw,))
        email = raw.strip()
        if not email:
            raise InvalidAddress('Address must not be empty')
        if ADDRESS_RE.match(email) is None:
            raise InvalidAddress('Malformed address: %r' % raw)
        if personal is not None:
            if not isinstance(personal, str) or not personal.strip():
                raise InvalidAddress(
                    'Personal name for %s must not be empty' % email)
            if '\r' in personal or '\n' in personal:
                raise InvalidAddress(
                    'Personal name for %s contains a line break' % email)
        return Address(email, personal)

    def parse(self, entry):
        """Turn a batch entry into an `Address`.

        `entry` is an `Address`, an email string or an
        ``(email, personal)`` pair.
        """
        if isinstance(entry, Address):
            return entry
        if isinstance(entry, (tuple, list)):
            if len(entry) != 2:
                raise InvalidAddress(
                    'Expected an (email, personal) pair, got %r' % (entry,))
            return self.validate(entry[0], entry[1])
        return self.validate(entry)


_validator = AddressValidator()
validate = _validator.validate
parse = _validator.parse
