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
import logging
import ssl
from smtplib import SMTP
from smtplib import SMTP_SSL
from ssl import SSLError

from zope.interface import implementer
from repoze.mailbuilder.interfaces import IMailer
from repoze.mailbuilder.interfaces import IMessage
from repoze.mailbuilder import session as _session

# Used when the session leaves the timeouts unset.
DEFAULT_SOCKET_TIMEOUT_MS = 60000


def _seconds(millis):
    if millis is None:
        millis = DEFAULT_SOCKET_TIMEOUT_MS
    return millis / 1000.0


@implementer(IMailer)
class SMTPMailer(object):
    """Sends a built message to the relay host named by its session."""

    log = logging.getLogger("repoze.mailbuilder.SMTPMailer")

    smtp = SMTP  # allow replacement for testing.
    smtp_ssl = SMTP_SSL  # allow replacement for testing.

    def ssl_context(self, session):
        context = ssl.create_default_context()
        if not session.flag(_session.MAIL_SSL_CHECK_SERVER_IDENTITY):
            context.check_hostname = False
        return context

    def smtp_factory(self, session):
        hostname = session.host
        if not hostname:
            raise RuntimeError('No relay host configured in the mail session')
        port = session.port
        if port is None:
            port = _session.DEFAULT_SMTP_PORT
        timeout = _seconds(session.socket_connection_timeout)
        if session.flag(_session.MAIL_SSL_ENABLE):
            connection = self.smtp_ssl(hostname, port, timeout=timeout,
                                       context=self.ssl_context(session))
        else:
            connection = self.smtp(hostname, port, timeout=timeout)
        sock = getattr(connection, 'sock', None)
        if sock is not None:
            sock.settimeout(_seconds(session.socket_timeout))
        connection.set_debuglevel(session.flag(_session.MAIL_DEBUG))
        return connection

    def send(self, message):
        if not IMessage.providedBy(message):
            raise ValueError(
               'Message must provide repoze.mailbuilder.interfaces.IMessage')
        session = message.session
        if session is None:
            raise RuntimeError('Message has no mail session')

        fromaddr = session.get_property(_session.MAIL_SMTP_FROM)
        if not fromaddr:
            fromaddr = message.from_address.email
        toaddrs = tuple(a.email for a in message.all_recipients)
        if not toaddrs:
            raise RuntimeError('Message has no recipients')
        msgtext = message.as_mime().as_bytes()

        connection = self.smtp_factory(session)

        # send EHLO
        code, response = connection.ehlo()
        if code < 200 or code >= 300:
            code, response = connection.helo()
            if code < 200 or code >= 300:
                raise RuntimeError(
                        'Error sending HELO to the SMTP server '
                        '(code=%s, response=%s)' % (code, response))

        # encryption support
        if not session.flag(_session.MAIL_SSL_ENABLE):
            have_tls = connection.has_extn('starttls')
            if not have_tls and session.flag(
                    _session.MAIL_STARTTLS_REQUIRED):
                raise RuntimeError('TLS is not available but TLS is required')
            if have_tls and session.flag(_session.MAIL_STARTTLS_ENABLE):
                connection.starttls(context=self.ssl_context(session))
                connection.ehlo()

        credentials = session.authenticator
        if connection.does_esmtp:
            if credentials is not None and credentials[1] is not None:
                connection.login(*credentials)
        elif credentials is not None:
            raise RuntimeError(
                    'Mailhost does not support ESMTP but a username '
                    'is configured')

        connection.sendmail(fromaddr, toaddrs, msgtext)
        try:
            connection.quit()
        except SSLError:
            # something weird happened while quiting
            connection.close()
        self.log.info("Mail from %s to %s sent via %s.",
                      fromaddr, ", ".join(toaddrs), session.host)
