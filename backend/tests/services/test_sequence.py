"""
编号生成器测试
"""
from grand_hotel.services.sequence import IdSequence


class TestIdSequence:
    def test_zero_padded_ids(self):
        seq = IdSequence("BK", 5)
        assert seq.next_id() == "BK00001"
        assert seq.next_id() == "BK00002"

    def test_parse(self):
        seq = IdSequence("G", 4)
        assert seq.parse("G0042") == 42
        assert seq.parse("X0042") is None
        assert seq.parse("G00a1") is None
        assert seq.parse("G") is None
        assert seq.parse("") is None

    def test_reconcile_uses_highest_suffix(self):
        seq = IdSequence("BK", 5)
        assert seq.reconcile(["BK00003", "BK00010", "BK00007"]) == 11
        assert seq.next_id() == "BK00011"

    def test_reconcile_ignores_foreign_ids(self):
        seq = IdSequence("PAY", 5)
        assert seq.reconcile(["BK00099", "PAYabc", "PAY00002"]) == 3

    def test_reconcile_never_moves_backwards(self):
        seq = IdSequence("BK", 5, start=20)
        assert seq.reconcile(["BK00003"]) == 20
        assert seq.reconcile([]) == 20
