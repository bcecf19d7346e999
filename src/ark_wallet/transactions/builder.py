"""Transaction builder — assemble, sign and finalize wallet transactions.

Every build follows the same pipeline:

1. create a fresh draft for the transaction kind
2. attach the kind-specific asset
3. sign once: with the passphrase if given, otherwise with the WIF
4. add the second signature when a second passphrase is given
5. return the finalized struct

Supplying neither passphrase nor WIF yields an unsigned struct; rejecting it
is up to the node.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ark_wallet.config.settings import ARK_EPOCH
from ark_wallet.crypto.transaction import Draft, TransactionBuilderFactory

if TYPE_CHECKING:
    from collections.abc import Mapping
    from datetime import datetime

logger = logging.getLogger(__name__)


def _sign(draft: Draft, passphrase: str | None, wif: str | None) -> Draft:
    if passphrase:
        return draft.sign(passphrase)
    if wif:
        return draft.sign_with_wif(wif)
    logger.debug("Building unsigned %s transaction", draft.type.name.lower())
    return draft


def _finalize(
    draft: Draft,
    passphrase: str | None,
    second_passphrase: str | None,
    wif: str | None,
) -> Mapping[str, Any]:
    draft = _sign(draft, passphrase, wif)
    if second_passphrase:
        draft = draft.second_sign(second_passphrase)
    return draft.get_struct()


class TransactionBuilder:
    """Builds signed vote, delegate, transfer and second-signature transactions.

    Args:
        epoch: Network epoch the transaction timestamps are relative to.
    """

    def __init__(self, *, epoch: datetime = ARK_EPOCH) -> None:
        self._factory = TransactionBuilderFactory(epoch=epoch)

    def build_vote(
        self,
        *,
        votes: list[str],
        passphrase: str | None = None,
        second_passphrase: str | None = None,
        wif: str | None = None,
    ) -> Mapping[str, Any]:
        """Build a vote transaction.

        Args:
            votes: ``"+<publicKey>"`` to vote, ``"-<publicKey>"`` to unvote.
            passphrase: Signing passphrase (takes precedence over ``wif``).
            second_passphrase: Second passphrase, if the wallet has one.
            wif: Signing key in WIF, used when no passphrase is given.
        """
        draft = self._factory.vote().votes_asset(votes)
        return _finalize(draft, passphrase, second_passphrase, wif)

    def build_delegate_registration(
        self,
        *,
        username: str,
        passphrase: str | None = None,
        second_passphrase: str | None = None,
        wif: str | None = None,
    ) -> Mapping[str, Any]:
        """Build a delegate registration for ``username``."""
        draft = self._factory.delegate_registration().username_asset(username)
        return _finalize(draft, passphrase, second_passphrase, wif)

    def build_transfer(
        self,
        *,
        amount: int,
        recipient_id: str,
        vendor_field: str | None = None,
        passphrase: str | None = None,
        second_passphrase: str | None = None,
        wif: str | None = None,
    ) -> Mapping[str, Any]:
        """Build a transfer of ``amount`` arktoshi to ``recipient_id``."""
        draft = (
            self._factory.transfer()
            .amount(amount)
            .recipient_id(recipient_id)
            .vendor_field(vendor_field)
        )
        return _finalize(draft, passphrase, second_passphrase, wif)

    def build_second_signature_registration(
        self,
        *,
        second_passphrase: str,
        passphrase: str | None = None,
        wif: str | None = None,
    ) -> Mapping[str, Any]:
        """Register ``second_passphrase``; this transaction is never second-signed."""
        draft = self._factory.second_signature().signature_asset(second_passphrase)
        return _finalize(draft, passphrase, None, wif)
