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
import operator
import unittest


class TestSession(unittest.TestCase):

    def _getTargetClass(self):
        from repoze.mailbuilder.session import Session
        return Session

    def _makeOne(self, *args, **kw):
        return self._getTargetClass()(*args, **kw)

    def test_instance_conforms_to_ISession(self):
        from zope.interface.verify import verifyObject
        from repoze.mailbuilder.interfaces import ISession
        verifyObject(ISession, self._makeOne())

    def test_empty(self):
        session = self._makeOne()
        self.assertEqual(dict(session.properties), {})
        self.assertEqual(session.host, None)
        self.assertEqual(session.port, None)
        self.assertEqual(session.socket_timeout, None)
        self.assertEqual(session.socket_connection_timeout, None)
        self.assertEqual(session.authenticator, None)

    def test_properties(self):
        from repoze.mailbuilder.session import MAIL_HOST, MAIL_PORT
        from repoze.mailbuilder.session import MAIL_SMTP_TIMEOUT
        from repoze.mailbuilder.session import MAIL_SMTP_CONNECTIONTIMEOUT
        session = self._makeOne({MAIL_HOST: 'smtp.example.com',
                                 MAIL_PORT: '587',
                                 MAIL_SMTP_TIMEOUT: '5000',
                                 MAIL_SMTP_CONNECTIONTIMEOUT: '3000'})
        self.assertEqual(session.host, 'smtp.example.com')
        self.assertEqual(session.port, 587)
        self.assertEqual(session.socket_timeout, 5000)
        self.assertEqual(session.socket_connection_timeout, 3000)
        self.assertEqual(session.get_property(MAIL_HOST), 'smtp.example.com')
        self.assertEqual(session.get_property('missing', 'dflt'), 'dflt')

    def test_properties_are_copied_and_read_only(self):
        from repoze.mailbuilder.session import MAIL_HOST
        props = {MAIL_HOST: 'smtp.example.com'}
        session = self._makeOne(props)
        props[MAIL_HOST] = 'changed.example.com'
        self.assertEqual(session.host, 'smtp.example.com')
        self.assertRaises(TypeError, operator.setitem, session.properties,
                          MAIL_HOST, 'x')

    def test_flag(self):
        from repoze.mailbuilder.session import MAIL_SSL_ENABLE, MAIL_DEBUG
        session = self._makeOne({MAIL_SSL_ENABLE: 'true',
                                 MAIL_DEBUG: 'false'})
        self.assertTrue(session.flag(MAIL_SSL_ENABLE))
        self.assertFalse(session.flag(MAIL_DEBUG))
        self.assertFalse(session.flag('mail.smtp.unknown'))


class TestSessionConfig(unittest.TestCase):

    def _makeOne(self, **kw):
        from repoze.mailbuilder.session import SessionConfig
        return SessionConfig(**kw)

    def test_defaults(self):
        config = self._makeOne()
        self.assertEqual(config.host_name, None)
        self.assertEqual(config.smtp_port, None)
        self.assertFalse(config.ssl_on_connect)
        self.assertEqual(config.socket_timeout, None)
        self.assertEqual(config.socket_connection_timeout, None)

    def test_copy(self):
        config = self._makeOne(host_name='localhost', smtp_port=2525)
        copied = config.copy()
        self.assertFalse(copied is config)
        self.assertEqual(copied.host_name, 'localhost')
        self.assertEqual(copied.smtp_port, 2525)
        copied.host_name = 'other'
        self.assertEqual(config.host_name, 'localhost')


class TestSessionResolver(unittest.TestCase):

    def _getTargetClass(self):
        from repoze.mailbuilder.session import SessionResolver
        return SessionResolver

    def _makeOne(self, *args, **kw):
        return self._getTargetClass()(*args, **kw)

    def _makeConfig(self, **kw):
        from repoze.mailbuilder.session import SessionConfig
        return SessionConfig(**kw)

    def _resolve(self, explicit=None, **kw):
        return self._makeOne().resolve(explicit, self._makeConfig(**kw))

    def test_class_conforms_to_ISessionResolver(self):
        from zope.interface.verify import verifyClass
        from repoze.mailbuilder.interfaces import ISessionResolver
        verifyClass(ISessionResolver, self._getTargetClass())

    def test_explicit_session_wins(self):
        from repoze.mailbuilder.session import Session, MAIL_HOST
        explicit = Session({MAIL_HOST: 'smtp.example.com'})
        session = self._resolve(explicit, host_name='localhost',
                                smtp_port=2525, ssl_on_connect=True)
        self.assertTrue(session is explicit)
        self.assertEqual(session.host, 'smtp.example.com')

    def test_host_name_only(self):
        from repoze.mailbuilder.session import MAIL_TRANSPORT_PROTOCOL
        from repoze.mailbuilder.session import MAIL_SSL_ENABLE
        from repoze.mailbuilder.session import MAIL_SMTP_TIMEOUT
        from repoze.mailbuilder.session import MAIL_SMTP_AUTH
        session = self._resolve(host_name='localhost')
        self.assertEqual(session.host, 'localhost')
        self.assertEqual(session.port, 25)
        self.assertEqual(session.get_property(MAIL_TRANSPORT_PROTOCOL),
                         'smtp')
        self.assertFalse(session.flag(MAIL_SSL_ENABLE))
        self.assertEqual(session.get_property(MAIL_SMTP_TIMEOUT), None)
        self.assertEqual(session.get_property(MAIL_SMTP_AUTH), None)
        self.assertEqual(session.authenticator, None)

    def test_explicit_port(self):
        session = self._resolve(host_name='smtp.example.com', smtp_port=25)
        self.assertEqual(session.port, 25)
        session = self._resolve(host_name='smtp.example.com', smtp_port=587,
                                ssl_on_connect=True)
        self.assertEqual(session.port, 587)

    def test_ssl_on_connect_default_port(self):
        from repoze.mailbuilder.session import MAIL_SSL_ENABLE
        session = self._resolve(host_name='localhost', ssl_on_connect=True)
        self.assertEqual(session.port, 465)
        self.assertTrue(session.flag(MAIL_SSL_ENABLE))

    def test_timeouts(self):
        session = self._resolve(host_name='smtp.example.com', smtp_port=25,
                                socket_timeout=5000,
                                socket_connection_timeout=3000)
        self.assertEqual(session.socket_timeout, 5000)
        self.assertEqual(session.socket_connection_timeout, 3000)

    def test_starttls(self):
        from repoze.mailbuilder.session import MAIL_STARTTLS_ENABLE
        from repoze.mailbuilder.session import MAIL_STARTTLS_REQUIRED
        session = self._resolve(host_name='localhost', start_tls_enabled=True,
                                start_tls_required=True)
        self.assertTrue(session.flag(MAIL_STARTTLS_ENABLE))
        self.assertTrue(session.flag(MAIL_STARTTLS_REQUIRED))

    def test_check_server_identity_needs_encryption(self):
        from repoze.mailbuilder.session import MAIL_SSL_CHECK_SERVER_IDENTITY
        session = self._resolve(host_name='localhost',
                                ssl_check_server_identity=True)
        self.assertFalse(session.flag(MAIL_SSL_CHECK_SERVER_IDENTITY))
        session = self._resolve(host_name='localhost', ssl_on_connect=True,
                                ssl_check_server_identity=True)
        self.assertTrue(session.flag(MAIL_SSL_CHECK_SERVER_IDENTITY))
        session = self._resolve(host_name='localhost', start_tls_enabled=True,
                                ssl_check_server_identity=True)
        self.assertTrue(session.flag(MAIL_SSL_CHECK_SERVER_IDENTITY))

    def test_bounce_address(self):
        from repoze.mailbuilder.session import MAIL_SMTP_FROM
        session = self._resolve(host_name='localhost',
                                bounce_address='bounces@example.com')
        self.assertEqual(session.get_property(MAIL_SMTP_FROM),
                         'bounces@example.com')

    def test_authentication(self):
        from repoze.mailbuilder.session import MAIL_SMTP_AUTH, MAIL_SMTP_USER
        session = self._resolve(host_name='localhost', username='foo',
                                password='evil')
        self.assertTrue(session.flag(MAIL_SMTP_AUTH))
        self.assertEqual(session.get_property(MAIL_SMTP_USER), 'foo')
        self.assertEqual(session.authenticator, ('foo', 'evil'))
        self.assertFalse('evil' in session.properties.values())

    def test_debug(self):
        from repoze.mailbuilder.session import MAIL_DEBUG
        session = self._resolve(host_name='localhost', debug=True)
        self.assertTrue(session.flag(MAIL_DEBUG))

    def test_no_host_name(self):
        session = self._resolve()
        self.assertEqual(dict(session.properties), {})
        self.assertEqual(session.host, None)

    def test_empty_host_name(self):
        session = self._resolve(host_name='', smtp_port=25)
        self.assertEqual(session.host, None)
        self.assertEqual(session.port, None)

    def test_bad_port(self):
        from repoze.mailbuilder.exceptions import SessionConstructionFailure
        for port in (0, -1, 65536, '25', 25.0, True):
            self.assertRaises(SessionConstructionFailure, self._resolve,
                              host_name='localhost', smtp_port=port)

    def test_bad_timeouts(self):
        from repoze.mailbuilder.exceptions import SessionConstructionFailure
        self.assertRaises(SessionConstructionFailure, self._resolve,
                          host_name='localhost', socket_timeout=-1)
        self.assertRaises(SessionConstructionFailure, self._resolve,
                          host_name='localhost',
                          socket_connection_timeout='fast')

    def test_session_construction_failure_is_runtime_error(self):
        self.assertRaises(RuntimeError, self._resolve,
                          host_name='localhost', smtp_port=0)

    def test_custom_links(self):
        from repoze.mailbuilder.session import Session, MAIL_HOST
        from repoze.mailbuilder.session import explicit_session
        from repoze.mailbuilder.session import configured_session
        fallback = Session({MAIL_HOST: 'fallback.example.com'})

        def fallback_session(explicit, config):
            return fallback
        resolver = self._makeOne([explicit_session, configured_session,
                                  fallback_session])
        session = resolver.resolve(None, self._makeConfig())
        self.assertTrue(session is fallback)
        session = resolver.resolve(None, self._makeConfig(host_name='mx'))
        self.assertEqual(session.host, 'mx')

    def test_no_link_resolves(self):
        from repoze.mailbuilder.exceptions import SessionConstructionFailure
        resolver = self._makeOne([lambda explicit, config: None])
        self.assertRaises(SessionConstructionFailure, resolver.resolve,
                          None, self._makeConfig())
