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
from zope.interface import implementer
from repoze.mailbuilder.interfaces import IRecipientLists
from repoze.mailbuilder.exceptions import InvalidAddress
from repoze.mailbuilder import address

TO = 'to'
CC = 'cc'
BCC = 'bcc'
REPLY_TO = 'reply_to'

ROLES = (TO, CC, BCC, REPLY_TO)
PRIMARY_ROLES = (TO, CC, BCC)


@implementer(IRecipientLists)
class RecipientLists(object):
    """Ordered address lists, one per role.

    Every batch is validated in full before any list changes, so a bad
    entry leaves all lists as they were.  Duplicates are kept.
    """

    def __init__(self, validator=None):
        if validator is None:
            validator = address._validator
        self.validator = validator
        self._lists = dict((role, []) for role in ROLES)

    def _check_role(self, role):
        if role not in self._lists:
            raise ValueError('Unknown recipient role: %r' % (role,))

    def _parse(self, entries):
        if isinstance(entries, (str, address.Address)):
            entries = [entries]
        return [self.validator.parse(entry) for entry in entries]

    def add(self, role, entries):
        self._check_role(role)
        self._lists[role].extend(self._parse(entries))

    def set(self, role, entries):
        self._check_role(role)
        parsed = self._parse(entries)
        if not parsed:
            raise InvalidAddress('Address list for %s must not be empty'
                                 % role)
        self._lists[role] = parsed

    def list(self, role):
        self._check_role(role)
        return tuple(self._lists[role])

    def has_primary(self):
        for role in PRIMARY_ROLES:
            if self._lists[role]:
                return True
        return False

    def snapshot(self):
        return dict((role, tuple(addrs)) for role, addrs in
                    self._lists.items())
