"""
Submission gateway

Hands normalized swap instructions to the smart-wallet signer, which signs
with the passkey and broadcasts through the paymaster (no fees for the user).
"""

from __future__ import annotations

import logging
from typing import Optional, TYPE_CHECKING

from .solana_signer import SmartWalletSigner, TransactionOptions
from ..errors import SubmissionError
from ..config import config as global_config

if TYPE_CHECKING:
    from ..types import NormalizedInstructionSet

logger = logging.getLogger(__name__)


class SubmissionGateway:
    """
    Submits normalized instruction sets through a SmartWalletSigner

    No retry: a failed submission must restart from a fresh quote.

    Usage:
        gateway = SubmissionGateway(signer)
        signature = gateway.submit(normalized, redirect_url="exp://myapp")
    """

    def __init__(
        self,
        signer: SmartWalletSigner,
        compute_unit_limit: Optional[int] = None,
        cluster: Optional[str] = None,
        redirect_url: Optional[str] = None,
    ):
        self._signer = signer
        self._compute_unit_limit = compute_unit_limit or global_config.relay.compute_unit_limit
        self._cluster = cluster or global_config.relay.cluster
        self._redirect_url = redirect_url or global_config.relay.redirect_url

    @property
    def signer(self) -> SmartWalletSigner:
        return self._signer

    def options_for(self, normalized: "NormalizedInstructionSet") -> TransactionOptions:
        """Signer options; legacy swaps carry an empty lookup table tuple"""
        return TransactionOptions(
            compute_unit_limit=self._compute_unit_limit,
            cluster_simulation=self._cluster,
            address_lookup_tables=tuple(normalized.lookup_tables),
        )

    def submit(
        self,
        normalized: "NormalizedInstructionSet",
        redirect_url: Optional[str] = None,
    ) -> str:
        """
        Sign and broadcast through the smart-wallet signer

        Args:
            normalized: Instructions and lookup tables to submit
            redirect_url: Callback target for the passkey flow

        Returns:
            Transaction signature

        Raises:
            SubmissionError: Wrapping whatever reason the signer reports
        """
        options = self.options_for(normalized)
        target = redirect_url or self._redirect_url

        logger.info(
            f"Submitting {len(normalized.instructions)} instruction(s) "
            f"(cu_limit={options.compute_unit_limit}, cluster={options.cluster_simulation}, "
            f"luts={len(options.address_lookup_tables)})"
        )

        try:
            signature = self._signer.sign_and_send(
                list(normalized.instructions),
                options,
                redirect_url=target,
            )
        except SubmissionError:
            raise
        except Exception as e:
            raise SubmissionError.relay_failed(e) from e

        if not signature:
            raise SubmissionError.no_signature()

        return str(signature)
