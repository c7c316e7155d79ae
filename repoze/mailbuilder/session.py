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
Transport sessions and how they are resolved.

A session is a read-only bag of transport properties.  The mailer reads
the relay host, port, encryption and timeouts from it; nothing in this
module opens a connection.

Resolution runs a chain of links in order.  Each link gets the explicit
session (or None) and a `SessionConfig` and returns a session or None to
let the next link try:

    ( explicit session given? )--yes--> use it unchanged
               | no
               V
    ( config.host_name set? )--yes--> build one from the config
               | no
               V
    ( empty session; delivery will fail later, not now )
"""

import logging
from types import MappingProxyType

from zope.interface import implementer
from repoze.mailbuilder.interfaces import ISession
from repoze.mailbuilder.interfaces import ISessionResolver
from repoze.mailbuilder.exceptions import SessionConstructionFailure

log = logging.getLogger(__name__)

MAIL_TRANSPORT_PROTOCOL = 'mail.transport.protocol'
MAIL_HOST = 'mail.smtp.host'
MAIL_PORT = 'mail.smtp.port'
MAIL_SSL_ENABLE = 'mail.smtp.ssl.enable'
MAIL_STARTTLS_ENABLE = 'mail.smtp.starttls.enable'
MAIL_STARTTLS_REQUIRED = 'mail.smtp.starttls.required'
MAIL_SSL_CHECK_SERVER_IDENTITY = 'mail.smtp.ssl.checkserveridentity'
MAIL_SMTP_FROM = 'mail.smtp.from'
MAIL_SMTP_AUTH = 'mail.smtp.auth'
MAIL_SMTP_USER = 'mail.smtp.user'
MAIL_SMTP_TIMEOUT = 'mail.smtp.timeout'
MAIL_SMTP_CONNECTIONTIMEOUT = 'mail.smtp.connectiontimeout'
MAIL_DEBUG = 'mail.debug'

SMTP = 'smtp'
DEFAULT_SMTP_PORT = 25
DEFAULT_SSL_SMTP_PORT = 465


@implementer(ISession)
class Session(object):
    """Transport properties plus an optional (username, password).

    The properties are copied on construction and exposed read-only.
    """

    properties = property(lambda self: self._properties)
    authenticator = property(lambda self: self._authenticator)

    def __init__(self, properties=None, authenticator=None):
        self._properties = MappingProxyType(dict(properties or {}))
        self._authenticator = authenticator

    def get_property(self, name, default=None):
        return self._properties.get(name, default)

    def flag(self, name):
        return self._properties.get(name) == 'true'

    @property
    def host(self):
        return self._properties.get(MAIL_HOST)

    @property
    def port(self):
        port = self._properties.get(MAIL_PORT)
        if port is None:
            return None
        return int(port)

    def _millis(self, name):
        value = self._properties.get(name)
        if value is None:
            return None
        return int(value)

    socket_timeout = property(lambda self: self._millis(MAIL_SMTP_TIMEOUT))
    socket_connection_timeout = property(
        lambda self: self._millis(MAIL_SMTP_CONNECTIONTIMEOUT))

    def __repr__(self):
        return '<Session host=%r port=%r>' % (
            self.host, self._properties.get(MAIL_PORT))


class SessionConfig(object):
    """Discrete settings a session is built from.

    Only consulted when no explicit session was supplied.  Timeouts are
    in milliseconds; None leaves them to the transport.
    """

    def __init__(self, host_name=None, smtp_port=None, ssl_on_connect=False,
                 socket_timeout=None, socket_connection_timeout=None,
                 start_tls_enabled=False, start_tls_required=False,
                 ssl_check_server_identity=False, bounce_address=None,
                 username=None, password=None, debug=False):
        self.host_name = host_name
        self.smtp_port = smtp_port
        self.ssl_on_connect = ssl_on_connect
        self.socket_timeout = socket_timeout
        self.socket_connection_timeout = socket_connection_timeout
        self.start_tls_enabled = start_tls_enabled
        self.start_tls_required = start_tls_required
        self.ssl_check_server_identity = ssl_check_server_identity
        self.bounce_address = bounce_address
        self.username = username
        self.password = password
        self.debug = debug

    def copy(self):
        return self.__class__(**vars(self))

    def __repr__(self):
        return '<SessionConfig host_name=%r smtp_port=%r>' % (
            self.host_name, self.smtp_port)


def _flag(value):
    return value and 'true' or 'false'


def _check_int(name, value, minimum, maximum=None):
    if isinstance(value, bool) or not isinstance(value, int):
        raise SessionConstructionFailure(
            '%s must be an integer, not %r' % (name, value))
    if value < minimum or (maximum is not None and value > maximum):
        raise SessionConstructionFailure(
            '%s out of range: %d' % (name, value))
    return str(value)


def explicit_session(explicit, config):
    return explicit


def configured_session(explicit, config):
    if not config.host_name:
        return None

    properties = {
        MAIL_TRANSPORT_PROTOCOL: SMTP,
        MAIL_HOST: config.host_name,
        MAIL_DEBUG: _flag(config.debug),
        MAIL_STARTTLS_ENABLE: _flag(config.start_tls_enabled),
        MAIL_STARTTLS_REQUIRED: _flag(config.start_tls_required),
        }

    port = config.smtp_port
    if port is None:
        if config.ssl_on_connect:
            port = DEFAULT_SSL_SMTP_PORT
        else:
            port = DEFAULT_SMTP_PORT
    properties[MAIL_PORT] = _check_int('smtp_port', port, 1, 65535)

    if config.ssl_on_connect:
        properties[MAIL_SSL_ENABLE] = 'true'

    if ((config.ssl_on_connect or config.start_tls_enabled)
            and config.ssl_check_server_identity):
        properties[MAIL_SSL_CHECK_SERVER_IDENTITY] = 'true'

    if config.bounce_address:
        properties[MAIL_SMTP_FROM] = config.bounce_address

    authenticator = None
    if config.username:
        properties[MAIL_SMTP_AUTH] = 'true'
        properties[MAIL_SMTP_USER] = config.username
        authenticator = (config.username, config.password)

    if config.socket_timeout is not None:
        properties[MAIL_SMTP_TIMEOUT] = _check_int(
            'socket_timeout', config.socket_timeout, 0)
    if config.socket_connection_timeout is not None:
        properties[MAIL_SMTP_CONNECTIONTIMEOUT] = _check_int(
            'socket_connection_timeout', config.socket_connection_timeout, 0)

    log.debug("Built session for %s:%s", config.host_name,
              properties[MAIL_PORT])
    return Session(properties, authenticator)


def empty_session(explicit, config):
    log.debug("No host name configured, using an empty session")
    return Session()


@implementer(ISessionResolver)
class SessionResolver(object):

    links = (explicit_session, configured_session, empty_session)

    def __init__(self, links=None):
        if links is not None:
            self.links = tuple(links)

    def resolve(self, explicit_session, config):
        for link in self.links:
            session = link(explicit_session, config)
            if session is not None:
                return session
        raise SessionConstructionFailure('No link produced a session')
