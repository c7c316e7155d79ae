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
"""`repoze.mailbuilder` interfaces

Building e-mail from applications works as follows:

- An application creates a message builder (`IMessageBuilder`) and sets
  the sender, the recipients, the subject, the body and any extra headers
  on it.  Addresses and headers are validated as they are added, so a
  malformed value is reported by the call that supplied it.

- The builder either reuses a session (`ISession`) handed to it by the
  application or asks a session resolver (`ISessionResolver`) to make one
  from the host, port, SSL and timeout settings it was given.

- Calling ``build`` produces exactly one immutable message (`IMessage`).
  A builder that already built refuses to build again, so the same
  logical message cannot be dispatched twice by accident.

- The message is handed to a mail delivery (`IMailDelivery`), which joins
  the current transaction and passes the message to a mailer (`IMailer`)
  only when the transaction commits.  The package provides
  `SMTPMailer`, which talks to the relay host named by the session.
"""

from zope.interface import Attribute, Interface


class IAddress(Interface):
    """A validated e-mail address with an optional display name."""

    email = Attribute("The address proper, e.g. 'jim@example.com'.")

    personal = Attribute("The display name, or None.")


class IAddressValidator(Interface):

    def validate(raw, personal=None):
        """Return an `IAddress` for `raw` and `personal`.

        Raises `InvalidAddress` if `raw` is not of the form
        local-part@domain or if `personal` is empty.
        """


class IHeaderStore(Interface):
    """Extra headers of a message, keyed by header name."""

    def set(name, value):
        """Store `value` under `name`, replacing any earlier value.

        Raises `InvalidHeader` if either is empty.
        """

    def get(name, default=None):
        """Return the value stored under `name`."""

    def snapshot():
        """Return a read-only copy of the current headers."""


class IRecipientLists(Interface):
    """The To, Cc, Bcc and Reply-To address lists of a message."""

    def add(role, entries):
        """Validate `entries` and append them to the `role` list.

        Either every entry is added or, on `InvalidAddress`, none is.
        """

    def list(role):
        """Return the addresses of `role` in the order they were added."""


class ISession(Interface):
    """Transport configuration understood by a mailer."""

    properties = Attribute("Read-only mapping of transport properties.")

    host = Attribute("The relay host name, or None.")

    def get_property(name, default=None):
        """Return a single transport property."""


class ISessionResolver(Interface):

    def resolve(explicit_session, config):
        """Return `explicit_session` if given, else a session built from
        the `SessionConfig` `config`.

        Raises `SessionConstructionFailure` if `config` holds values a
        session cannot be built from.
        """


class IMessage(Interface):
    """An immutable, fully assembled message."""

    from_address = Attribute("The sender `IAddress`.")
    to = Attribute("Tuple of To addresses.")
    cc = Attribute("Tuple of Cc addresses.")
    bcc = Attribute("Tuple of Bcc addresses.")
    reply_to = Attribute("Tuple of Reply-To addresses.")
    subject = Attribute("The subject line.")
    body = Attribute("The plain text body.")
    headers = Attribute("Read-only mapping of extra headers.")
    sent_date = Attribute("The `datetime` used for the Date header.")
    session = Attribute("The `ISession` the message is sent through.")
    all_recipients = Attribute("To, Cc and Bcc addresses, in that order.")

    def as_mime():
        """Return a new `email.message.Message` rendering of the message."""

    def replace(**changes):
        """Return a copy of the message with some fields replaced."""


class IMessageBuilder(Interface):
    """Collects the parts of a message and builds it once."""

    state = Attribute("One of the `BuilderState` values.")

    message = Attribute("The built `IMessage`, or None before `build`.")

    def build():
        """Build and return the message.

        Raises `MissingRequiredField` when no sender (or, depending on the
        recipient policy, no recipient) was set and `AlreadyBuilt` when
        called a second time.
        """

    def get_mail_session():
        """Return the `ISession` the message will be sent through."""

    def get_host_name():
        """Return the relay host name, or None if none is known yet."""


class IMailDelivery(Interface):
    """Send an email to a group of people.
    """

    transaction_manager = Attribute("The transaction manager to use.")

    def send(message):
        """Send an `IMessage`.

        If the message has no Message-Id header, one will be generated.

        Returns the message ID.

        Messages are actually sent during transaction commit.
        """


class IMailer(Interface):
    """Handles synchronous mail delivery.
    """
    def send(message):
        """Send an `IMessage` through the relay named by its session.

        Messages are sent immediately.
        """
