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
Message builder

The builder collects the parts of a message and turns them into one
immutable `Message`.  It is not thread safe; use one builder per message.
"""

import datetime
import logging

from zope.interface import implementer
from repoze.mailbuilder.interfaces import IMessageBuilder
from repoze.mailbuilder.exceptions import AlreadyBuilt
from repoze.mailbuilder.exceptions import MissingRequiredField
from repoze.mailbuilder.headers import HeaderStore
from repoze.mailbuilder.message import Message
from repoze.mailbuilder.recipients import RecipientLists
from repoze.mailbuilder.recipients import TO, CC, BCC, REPLY_TO
from repoze.mailbuilder.session import SessionConfig
from repoze.mailbuilder.session import SessionResolver
from repoze.mailbuilder import address

RECIPIENTS_REQUIRED = 'required'
RECIPIENTS_WARN = 'warn'


class BuilderState(object):
    EMPTY = 0
    CONFIGURED = 1
    BUILT = 2


def _now():
    return datetime.datetime.now(datetime.timezone.utc).astimezone()


def _config_attribute(name):
    def fget(self):
        return getattr(self.config, name)

    def fset(self, value):
        self._mutating()
        setattr(self.config, name, value)
    return property(fget, fset)


@implementer(IMessageBuilder)
class MessageBuilder(object):
    """Collects sender, recipients, headers, subject and body.

    Session settings (`host_name`, `smtp_port`, ...) are stored on
    `config` and only used when no `mail_session` is given.  The first
    session resolved is kept until `mail_session` is replaced.
    """

    log = logging.getLogger("repoze.mailbuilder.MessageBuilder")

    host_name = _config_attribute('host_name')
    smtp_port = _config_attribute('smtp_port')
    ssl_on_connect = _config_attribute('ssl_on_connect')
    socket_timeout = _config_attribute('socket_timeout')
    socket_connection_timeout = _config_attribute('socket_connection_timeout')
    start_tls_enabled = _config_attribute('start_tls_enabled')
    start_tls_required = _config_attribute('start_tls_required')
    ssl_check_server_identity = _config_attribute('ssl_check_server_identity')
    bounce_address = _config_attribute('bounce_address')
    debug = _config_attribute('debug')

    state = property(lambda self: self._state)
    message = property(lambda self: self._message)
    from_address = property(lambda self: self._from_address)
    to_addresses = property(lambda self: self.recipients.list(TO))
    cc_addresses = property(lambda self: self.recipients.list(CC))
    bcc_addresses = property(lambda self: self.recipients.list(BCC))
    reply_to_addresses = property(lambda self: self.recipients.list(REPLY_TO))
    headers = property(lambda self: self._headers.view())

    def __init__(self, config=None, resolver=None, delivery=None,
                 recipient_policy=RECIPIENTS_REQUIRED):
        if config is None:
            config = SessionConfig()
        else:
            config = config.copy()
        if resolver is None:
            resolver = SessionResolver()
        if recipient_policy not in (RECIPIENTS_REQUIRED, RECIPIENTS_WARN):
            raise ValueError('Unknown recipient policy: %r'
                             % (recipient_policy,))
        self.config = config
        self.resolver = resolver
        self.delivery = delivery
        self.recipient_policy = recipient_policy
        self.recipients = RecipientLists()
        self._headers = HeaderStore()
        self._from_address = None
        self._subject = None
        self._body = None
        self._sent_date = None
        self._explicit_session = None
        self._session = None
        self._message = None
        self._state = BuilderState.EMPTY

    def _check_not_built(self):
        if self._state == BuilderState.BUILT:
            raise AlreadyBuilt('The message has already been built')

    def _mutating(self):
        self._check_not_built()
        self._state = BuilderState.CONFIGURED

    # Session

    def _get_mail_session_attr(self):
        return self._explicit_session

    def _set_mail_session_attr(self, session):
        self._mutating()
        self._explicit_session = session
        self._session = None

    mail_session = property(_get_mail_session_attr, _set_mail_session_attr)

    def set_authentication(self, username, password):
        self._mutating()
        self.config.username = username
        self.config.password = password

    def get_mail_session(self):
        if self._session is None:
            self._session = self.resolver.resolve(
                self._explicit_session, self.config)
        else:
            self.log.debug("Reusing session %r", self._session)
        return self._session

    def get_host_name(self):
        session = self._session or self._explicit_session
        if session is not None:
            return session.host
        if self.config.host_name:
            return self.config.host_name
        return None

    # Addresses

    def set_from(self, email, personal=None):
        self._check_not_built()
        from_address = address.validate(email, personal)
        self._mutating()
        self._from_address = from_address

    def _add(self, role, entries):
        self._check_not_built()
        self.recipients.add(role, entries)
        self._mutating()

    def _set(self, role, entries):
        self._check_not_built()
        self.recipients.set(role, entries)
        self._mutating()

    def add_to(self, *entries):
        self._add(TO, entries)

    def add_cc(self, *entries):
        self._add(CC, entries)

    def add_bcc(self, *entries):
        self._add(BCC, entries)

    def add_reply_to(self, *entries):
        self._add(REPLY_TO, entries)

    def set_to(self, entries):
        self._set(TO, entries)

    def set_cc(self, entries):
        self._set(CC, entries)

    def set_bcc(self, entries):
        self._set(BCC, entries)

    def set_reply_to(self, entries):
        self._set(REPLY_TO, entries)

    # Headers, subject, body

    def add_header(self, name, value):
        self._check_not_built()
        self._headers.set(name, value)
        self._mutating()

    def set_headers(self, headers):
        self._check_not_built()
        self._headers.update(headers)
        self._mutating()

    def get_header(self, name):
        return self._headers.get(name)

    def _get_subject(self):
        return self._subject

    def _set_subject(self, subject):
        self._mutating()
        self._subject = subject

    subject = property(_get_subject, _set_subject)

    def _get_body(self):
        return self._body

    def set_msg(self, body):
        self._mutating()
        self._body = body

    body = property(_get_body, set_msg)

    def _get_sent_date(self):
        return self._sent_date

    def _set_sent_date(self, sent_date):
        self._mutating()
        self._sent_date = sent_date

    sent_date = property(_get_sent_date, _set_sent_date)

    def get_sent_date(self):
        if self._sent_date is None:
            return _now()
        return self._sent_date

    # Building

    def build(self):
        if self._state == BuilderState.BUILT:
            raise AlreadyBuilt('The message has already been built')
        if self._from_address is None:
            raise MissingRequiredField('From address required')
        if not self.recipients.has_primary():
            if self.recipient_policy == RECIPIENTS_REQUIRED:
                raise MissingRequiredField(
                    'At least one receiver address required')
            self.log.warning("Building message from %s without recipients",
                             self._from_address)

        session = self.get_mail_session()
        lists = self.recipients.snapshot()
        message = Message(self._from_address,
                          to=lists[TO],
                          cc=lists[CC],
                          bcc=lists[BCC],
                          reply_to=lists[REPLY_TO],
                          subject=self._subject,
                          body=self._body,
                          headers=self._headers.snapshot(),
                          sent_date=self.get_sent_date(),
                          session=session)

        self._message = message
        self._state = BuilderState.BUILT
        self.log.info("Built message from %s to %s", message.from_address,
                      ", ".join(str(a) for a in message.all_recipients))
        return message

    def send(self, delivery=None):
        if delivery is None:
            delivery = self.delivery
        if delivery is None:
            raise MissingRequiredField('No mail delivery configured')
        message = self.build()
        return delivery.send(message)
