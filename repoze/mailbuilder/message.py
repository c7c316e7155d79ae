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
The immutable result of a build.
"""

from email.message import Message as MIMEMessage
from email.utils import format_datetime
from types import MappingProxyType

from zope.interface import implementer
from repoze.mailbuilder.interfaces import IMessage
from repoze.mailbuilder.headers import RESERVED

_FIELDS = ('from_address', 'to', 'cc', 'bcc', 'reply_to', 'subject', 'body',
           'headers', 'sent_date', 'session')


@implementer(IMessage)
class Message(object):
    """A fully assembled message.

    Address lists are stored as tuples and headers as a read-only copy,
    so nothing done to the builder afterwards can reach a `Message`.
    """
    __slots__ = tuple('_' + name for name in _FIELDS)

    from_address = property(lambda self: self._from_address)
    to = property(lambda self: self._to)
    cc = property(lambda self: self._cc)
    bcc = property(lambda self: self._bcc)
    reply_to = property(lambda self: self._reply_to)
    subject = property(lambda self: self._subject)
    body = property(lambda self: self._body)
    headers = property(lambda self: self._headers)
    sent_date = property(lambda self: self._sent_date)
    session = property(lambda self: self._session)

    def __init__(self, from_address, to=(), cc=(), bcc=(), reply_to=(),
                 subject=None, body=None, headers=None, sent_date=None,
                 session=None):
        values = {
            'from_address': from_address,
            'to': tuple(to),
            'cc': tuple(cc),
            'bcc': tuple(bcc),
            'reply_to': tuple(reply_to),
            'subject': subject,
            'body': body,
            'headers': MappingProxyType(dict(headers or {})),
            'sent_date': sent_date,
            'session': session,
            }
        for name in _FIELDS:
            object.__setattr__(self, '_' + name, values[name])

    def __setattr__(self, name, value):
        raise AttributeError('Message is immutable')

    def __delattr__(self, name):
        raise AttributeError('Message is immutable')

    @property
    def all_recipients(self):
        return self._to + self._cc + self._bcc

    def replace(self, **changes):
        """Return a new `Message` with `changes` applied."""
        values = dict((name, getattr(self, '_' + name)) for name in _FIELDS)
        unknown = set(changes) - set(_FIELDS)
        if unknown:
            raise TypeError('Unknown message fields: %s'
                            % ', '.join(sorted(unknown)))
        values.update(changes)
        return self.__class__(**values)

    def as_mime(self):
        mime = MIMEMessage()
        for name, value in self._headers.items():
            if name.lower() not in RESERVED:
                mime[name] = value
        _replace(mime, 'From', str(self._from_address))
        if self._to:
            _replace(mime, 'To', ', '.join(str(a) for a in self._to))
        if self._cc:
            _replace(mime, 'Cc', ', '.join(str(a) for a in self._cc))
        if self._reply_to:
            _replace(mime, 'Reply-To',
                     ', '.join(str(a) for a in self._reply_to))
        if self._subject is not None:
            _replace(mime, 'Subject', self._subject)
        if self._sent_date is not None:
            _replace(mime, 'Date', format_datetime(self._sent_date))
        mime.set_payload(self._body or '', 'utf-8')
        return mime

    def __repr__(self):
        return '<Message from %s to %d recipient(s): %r>' % (
            self._from_address, len(self.all_recipients), self._subject)


def _replace(mime, name, value):
    del mime[name]
    mime[name] = value
