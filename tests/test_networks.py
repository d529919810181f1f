"""Tests for network resolution and the labels derived from it."""

import pytest

from telemetry_service import networks
from telemetry_service.networks import MAINNET, TESTNET, UNKNOWN, network_label, resolve, store_name


class TestResolve:
    """Embedded chain id beats path hint; both absent means unknown."""

    @pytest.mark.parametrize("hint", [None, MAINNET, TESTNET])
    def test_embedded_mainnet_wins(self, hint) -> None:
        assert resolve(hint, "mainnet") == networks.Mainnet()

    @pytest.mark.parametrize("hint", [None, MAINNET, TESTNET])
    def test_embedded_testnet_wins(self, hint) -> None:
        assert resolve(hint, "testnet") == networks.Testnet()

    def test_embedded_unknown_becomes_other(self) -> None:
        assert resolve(MAINNET, "statelessnet") == networks.Other("statelessnet")

    def test_matching_is_case_sensitive(self) -> None:
        assert resolve(None, "Mainnet") == networks.Other("Mainnet")

    def test_path_hint_used_without_embedded_id(self) -> None:
        assert resolve(TESTNET, None) == TESTNET
        assert resolve(MAINNET, None) == MAINNET

    def test_empty_embedded_id_falls_back_to_hint(self) -> None:
        assert resolve(TESTNET, "") == TESTNET

    def test_nothing_supplied_is_unknown(self) -> None:
        assert resolve(None, None) == UNKNOWN
        assert resolve(None, None) == networks.Other("unknown")


class TestNetworkLabel:

    def test_known_networks(self) -> None:
        assert network_label(MAINNET) == "mainnet"
        assert network_label(TESTNET) == "testnet"

    @pytest.mark.parametrize("name", ["foo", "bar", "xyz", "mainnet-fork", ""])
    def test_every_other_collapses(self, name) -> None:
        assert network_label(networks.Other(name)) == "other"


class TestStoreName:

    def test_known_networks_have_stores(self) -> None:
        assert store_name(MAINNET) == "mainnet"
        assert store_name(TESTNET) == "testnet"

    def test_other_has_no_store(self) -> None:
        # Even an Other literally named after a real network.
        assert store_name(networks.Other("mainnet")) is None
        assert store_name(UNKNOWN) is None
