"""
Lookup table decoding and resolution tests
"""

import sys
import threading
import time
from pathlib import Path

import pytest

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from solders.address_lookup_table_account import AddressLookupTableAccount
from solders.pubkey import Pubkey

from passkey_swap.infra.lookup_tables import parse_lookup_table, resolve_lookup_tables
from passkey_swap.errors import LookupTableResolutionError, RpcError

from conftest import FakeReader, lookup_table_account_data


def _table(size=2):
    return AddressLookupTableAccount(
        key=Pubkey.new_unique(),
        addresses=[Pubkey.new_unique() for _ in range(size)],
    )


class TestParseLookupTable:

    def test_parse(self):
        addresses = [Pubkey.new_unique() for _ in range(3)]
        key = Pubkey.new_unique()
        table = parse_lookup_table(str(key), lookup_table_account_data(addresses))
        assert table.key == key
        assert list(table.addresses) == addresses

    def test_empty_table(self):
        table = parse_lookup_table(str(Pubkey.new_unique()), lookup_table_account_data([]))
        assert list(table.addresses) == []

    def test_too_short(self):
        with pytest.raises(ValueError):
            parse_lookup_table(str(Pubkey.new_unique()), b"\x01\x00\x00\x00")

    def test_uninitialized(self):
        with pytest.raises(ValueError):
            parse_lookup_table(str(Pubkey.new_unique()), lookup_table_account_data([], state=0))

    def test_truncated_addresses(self):
        data = lookup_table_account_data([Pubkey.new_unique()])[:-1]
        with pytest.raises(ValueError):
            parse_lookup_table(str(Pubkey.new_unique()), data)


class TestResolveLookupTables:

    def test_one_read_per_table_in_order(self):
        tables = [_table() for _ in range(5)]
        reader = FakeReader(tables=tables)
        addresses = [str(t.key) for t in tables]

        resolved = resolve_lookup_tables(reader, addresses, max_workers=3)

        assert [t.key for t in resolved] == [t.key for t in tables]
        assert sorted(reader.lookup_calls) == sorted(addresses)

    def test_duplicates_read_once(self):
        table = _table()
        reader = FakeReader(tables=[table])

        resolved = resolve_lookup_tables(reader, [str(table.key), str(table.key)])

        assert len(resolved) == 1
        assert reader.lookup_calls == [str(table.key)]

    def test_no_addresses(self):
        reader = FakeReader()
        assert resolve_lookup_tables(reader, []) == []
        assert reader.lookup_calls == []

    def test_missing_table_names_address(self):
        present = _table()
        missing = str(Pubkey.new_unique())
        reader = FakeReader(tables=[present])

        with pytest.raises(LookupTableResolutionError) as exc_info:
            resolve_lookup_tables(reader, [str(present.key), missing])

        assert exc_info.value.address == missing
        assert missing in exc_info.value.message

    def test_rpc_error_wrapped(self):
        address = str(Pubkey.new_unique())
        cause = RpcError("node unavailable")
        reader = FakeReader(error=cause)

        with pytest.raises(LookupTableResolutionError) as exc_info:
            resolve_lookup_tables(reader, [address])

        assert exc_info.value.address == address
        assert exc_info.value.original_error is cause

    def test_reads_run_concurrently(self):
        tables = [_table() for _ in range(3)]
        barrier = threading.Barrier(3, timeout=5)

        class BarrierReader(FakeReader):
            def get_address_lookup_table(self, address):
                # Every read must be in flight at once to pass the barrier
                barrier.wait()
                return super().get_address_lookup_table(address)

        reader = BarrierReader(tables=tables)
        resolved = resolve_lookup_tables(reader, [str(t.key) for t in tables], max_workers=3)
        assert len(resolved) == 3

    def test_foreign_reader_error_wrapped(self):
        address = str(Pubkey.new_unique())
        cause = RuntimeError("socket reset")
        reader = FakeReader(error=cause)

        with pytest.raises(LookupTableResolutionError) as exc_info:
            resolve_lookup_tables(reader, [address])

        assert exc_info.value.address == address
        assert exc_info.value.original_error is cause

    def test_first_failure_stops_remaining_reads(self):
        missing = str(Pubkey.new_unique())
        tables = [_table() for _ in range(4)]

        class SlowReader(FakeReader):
            def get_address_lookup_table(self, address):
                if address != missing:
                    time.sleep(0.2)
                return super().get_address_lookup_table(address)

        reader = SlowReader(tables=tables)
        addresses = [missing] + [str(t.key) for t in tables]

        with pytest.raises(LookupTableResolutionError) as exc_info:
            resolve_lookup_tables(reader, addresses, max_workers=1)

        assert exc_info.value.address == missing
        assert reader.lookup_calls[0] == missing
        assert len(reader.lookup_calls) < len(addresses)
