# test_hash.py
from py_ecc.optimized_bls12_381 import b2, eq, is_on_curve

from bls_signatures.utils import curve
from bls_signatures.utils.hash import (
    HASH_TO_POINT_DST,
    POP_DST,
    hash_message_to_point,
    hash_pubkey_to_point,
)


class TestHashToPoint:

    def test_domain_tags(self):
        """测试两个域分隔符互不相同且符合 IETF 草案格式。"""
        assert HASH_TO_POINT_DST == b"BLS_SIG_BLS12381G2_XMD:SHA-256_SSWU_RO_NUL_"
        assert POP_DST == b"BLS_SIG_BLS12381G1_XMD:SHA-256_SSWU_RO_POP_"
        assert HASH_TO_POINT_DST != POP_DST

    def test_message_hash(self, messages):
        """测试消息哈希的确定性、曲线成员性和子群成员性。"""
        h1 = hash_message_to_point(messages["msg1"])
        assert is_on_curve(h1, b2), "哈希结果必须在 G2 曲线上"
        assert curve.subgroup_check(h1), "哈希结果必须在素数阶子群中"
        assert eq(h1, hash_message_to_point(messages["msg1"])), "相同输入的哈希结果必须相同"
        assert not eq(h1, hash_message_to_point(messages["msg2"])), "不同消息的哈希结果必须不同"

    def test_empty_message(self):
        h = hash_message_to_point(b"")
        assert is_on_curve(h, b2)

    def test_pubkey_hash_uses_separate_tag(self, keypair1):
        """公钥哈希必须与对同一字节串的消息哈希不同。"""
        pk = keypair1.public.point
        compressed = curve.g1_to_compressed_bytes(pk)
        pop_point = hash_pubkey_to_point(pk)
        assert curve.subgroup_check(pop_point)
        assert not eq(pop_point, hash_message_to_point(compressed))

    def test_pubkey_hash_is_projective_invariant(self, keypair1):
        """同一公钥的不同射影表示得到相同的哈希。"""
        pk = keypair1.public.point
        x, y, z = pk
        scaled = (x * 5, y * 5, z * 5)
        assert eq(hash_pubkey_to_point(pk), hash_pubkey_to_point(scaled))
