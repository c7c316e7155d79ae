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
"""Session settings from an ini file.

    [mail]
    hostname = smtp.example.com
    port = 587
    starttls = true
    username = relay-user
    password = secret
    timeout = 30000
"""
import os
from configparser import ConfigParser

from repoze.mailbuilder.session import SessionConfig

DEFAULT_SECTION = 'mail'


def boolean(s):
    s = str(s).lower()
    return s.startswith("t") or s.startswith("y") or s.startswith("1")


def string_or_none(s):
    if s in ('', 'None'):
        return None
    return s


def int_or_none(s):
    s = string_or_none(s)
    if s is None:
        return None
    return int(s)


_OPTIONS = (
    # (ini key, SessionConfig attribute, parser)
    ('hostname', 'host_name', string_or_none),
    ('port', 'smtp_port', int_or_none),
    ('ssl', 'ssl_on_connect', boolean),
    ('starttls', 'start_tls_enabled', boolean),
    ('starttls_required', 'start_tls_required', boolean),
    ('check_server_identity', 'ssl_check_server_identity', boolean),
    ('bounce_address', 'bounce_address', string_or_none),
    ('username', 'username', string_or_none),
    ('password', 'password', string_or_none),
    ('timeout', 'socket_timeout', int_or_none),
    ('connection_timeout', 'socket_connection_timeout', int_or_none),
    ('debug', 'debug', boolean),
    )


def load_session_config(path, section=DEFAULT_SECTION):
    if not os.path.exists(path):
        raise ValueError('No such configuration file: %s' % path)
    parser = ConfigParser(interpolation=None)
    parser.read(path)

    config = SessionConfig()
    if not parser.has_section(section):
        return config

    for key, name, parse in _OPTIONS:
        if parser.has_option(section, key):
            value = parse(parser.get(section, key))
            setattr(config, name, value)
    return config
