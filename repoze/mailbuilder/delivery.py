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
Transactional hand-off of built messages

`DirectMailDelivery` joins the current transaction and passes the message
to its mailer in the last phase of two-phase commit.  If the transaction
aborts, nothing is sent.
"""

import logging
from email.utils import make_msgid

from zope.interface import implementer
from repoze.mailbuilder.interfaces import IMailDelivery
from repoze.mailbuilder.interfaces import IMessage
import transaction
from transaction.interfaces import ISavepointDataManager
from transaction.interfaces import IDataManagerSavepoint

log = logging.getLogger(__name__)


class DataManagerState(object):
    INIT = 0
    TPC_BEGUN = 1
    TPC_VOTED = 2
    SENT = 3
    ABORTED = 4


@implementer(ISavepointDataManager)
class MessageDataManager(object):
    """Sends one message through `mailer` when the transaction finishes.
    """

    def __init__(self, mailer, message, transaction_manager=None):
        self.mailer = mailer
        self.message = message
        if transaction_manager is None:
            transaction_manager = transaction.manager
        self.transaction_manager = transaction_manager
        self.transaction = None
        self.state = DataManagerState.INIT

    def join_transaction(self, trans=None):
        if trans is None:
            trans = self.transaction_manager.get()
        if self.transaction is not None and self.transaction is not trans:
            raise ValueError("Already joined to another transaction")
        if self not in trans._resources:
            trans.join(self)
        self.transaction = trans

    def _check(self, trans, *states):
        if self.transaction is None:
            raise ValueError("Not in a transaction")
        if self.transaction is not trans:
            raise ValueError("In a different transaction")
        if states and self.state not in states:
            raise ValueError("Unexpected data manager state: %d"
                             % self.state)

    def commit(self, trans):
        self._check(trans)

    def abort(self, trans):
        self._check(trans, DataManagerState.INIT, DataManagerState.TPC_BEGUN,
                    DataManagerState.ABORTED)
        self.state = DataManagerState.ABORTED

    def sortKey(self):
        return str(id(self))

    def savepoint(self):
        if self.transaction is None:
            raise ValueError("Not in a transaction")
        return MessageSavepoint(self)

    def tpc_begin(self, trans, subtransaction=False):
        self._check(trans, DataManagerState.INIT)
        if subtransaction:
            raise ValueError("Subtransactions not supported")
        self.state = DataManagerState.TPC_BEGUN

    def tpc_vote(self, trans):
        self._check(trans, DataManagerState.TPC_BEGUN)
        self.state = DataManagerState.TPC_VOTED

    def tpc_finish(self, trans):
        self._check(trans, DataManagerState.TPC_VOTED)
        self.mailer.send(self.message)
        self.state = DataManagerState.SENT

    def tpc_abort(self, trans):
        self._check(trans, DataManagerState.TPC_BEGUN,
                    DataManagerState.TPC_VOTED, DataManagerState.ABORTED)
        self.state = DataManagerState.ABORTED


@implementer(IDataManagerSavepoint)
class MessageSavepoint(object):
    """Rolling back is left to `transaction`, which drops the data manager.
    """
    def __init__(self, data_manager):
        self.data_manager = data_manager

    def rollback(self):
        pass


def _header(message, name):
    # header names are case-insensitive on the wire
    name = name.lower()
    for key, value in message.headers.items():
        if key.lower() == name:
            return value
    return None


@implementer(IMailDelivery)
class DirectMailDelivery(object):

    def __init__(self, mailer, transaction_manager=None):
        self.mailer = mailer
        if transaction_manager is None:
            transaction_manager = transaction.manager
        self.transaction_manager = transaction_manager

    def send(self, message):
        if not IMessage.providedBy(message):
            raise ValueError(
                'Message must provide repoze.mailbuilder.interfaces.IMessage')
        messageid = _header(message, 'Message-Id')
        if messageid is None:
            messageid = make_msgid('repoze.mailbuilder')
            headers = dict(message.headers)
            headers['Message-Id'] = messageid
            message = message.replace(headers=headers)
        data_manager = MessageDataManager(
            self.mailer, message, transaction_manager=self.transaction_manager)
        data_manager.join_transaction()
        log.debug("Queued %s for delivery at commit", messageid)
        return messageid
