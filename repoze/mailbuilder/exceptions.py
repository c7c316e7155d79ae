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
"""Errors raised while assembling a message.

Validation errors derive from ``ValueError`` and state errors from
``RuntimeError`` so callers that only know the builtins still catch them.
"""


class EmailError(Exception):
    """Base class for all `repoze.mailbuilder` errors."""


class InvalidAddress(EmailError, ValueError):
    """A malformed email address or personal name."""


class InvalidHeader(EmailError, ValueError):
    """An empty or malformed header name or value."""


class MissingRequiredField(EmailError, ValueError):
    """A field needed to build or send the message was never set."""


class AlreadyBuilt(EmailError, RuntimeError):
    """The builder already produced its message."""


class SessionConstructionFailure(EmailError, RuntimeError):
    """The session could not be built from the configured values."""
