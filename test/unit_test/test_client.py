"""
WalletClient wiring tests
"""

import sys
from pathlib import Path

import pytest

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from solders.keypair import Keypair

from passkey_swap import WalletClient
from passkey_swap.infra import LocalRelaySigner, SubmissionGateway
from passkey_swap.modules import SwapModule, WalletModule
from passkey_swap.errors import ConfigurationError


class StaticSigner:
    current_owner_address = "Owner1111111111111111111111111111111111111"

    def sign_and_send(self, instructions, options, redirect_url=None):
        return "sig"


def test_lazy_modules():
    with WalletClient("https://api.devnet.solana.com", signer=StaticSigner()) as client:
        assert isinstance(client.wallet, WalletModule)
        assert client.wallet is client.wallet
        assert isinstance(client.swap, SwapModule)
        assert isinstance(client.gateway, SubmissionGateway)
        assert client.owner == StaticSigner.current_owner_address


def test_keypair_builds_local_signer():
    keypair = Keypair()
    with WalletClient("https://api.devnet.solana.com", keypair=keypair) as client:
        assert isinstance(client.signer, LocalRelaySigner)
        assert client.owner == str(keypair.pubkey())


def test_missing_signer():
    with WalletClient("https://api.devnet.solana.com") as client:
        with pytest.raises(ConfigurationError):
            _ = client.owner
