# test_types.py
import pickle

import pytest

from bls_signatures import (
    InvalidLengthError,
    ParseFromStringError,
    ProofOfPossession,
    ProofOfPossessionCompressed,
    ProofOfPossessionProjective,
    Pubkey,
    PubkeyCompressed,
    PubkeyProjective,
    Signature,
    SignatureCompressed,
    SignatureProjective,
)


class TestFixedBytes:

    def test_default_is_zero(self):
        """不带参数构造时得到全零值。"""
        assert bytes(Pubkey()) == bytes(96)
        assert bytes(SignatureCompressed()) == bytes(96)

    def test_length_checked(self):
        """测试构造时的长度检查。"""
        with pytest.raises(InvalidLengthError):
            Pubkey(bytes(95))
        with pytest.raises(InvalidLengthError):
            PubkeyCompressed(bytes(96))

    def test_rejects_non_bytes(self):
        with pytest.raises(TypeError):
            Pubkey("00" * 96)

    def test_families_never_compare_equal(self, keypair1, messages):
        """字节相同但类型不同的值不相等。"""
        sig = keypair1.sign(messages["msg1"]).to_compressed()
        pop = ProofOfPossessionCompressed(bytes(sig))
        assert bytes(sig) == bytes(pop)
        assert sig != pop
        assert not sig == pop
        assert sig == bytes(sig)

    def test_string_roundtrip(self, keypair1):
        """测试 multibase 字符串形式的往返。"""
        pk = keypair1.public.to_compressed()
        s = str(pk)
        assert s.startswith("z")
        assert PubkeyCompressed.from_str(s) == pk
        assert repr(pk) == f"PubkeyCompressed('{s}')"

        affine = keypair1.public.to_affine()
        assert Pubkey.from_str(str(affine)) == affine

    def test_from_str_errors(self, keypair1):
        """测试字符串解析的错误处理。"""
        with pytest.raises(ParseFromStringError):
            PubkeyCompressed.from_str("?notmultibase")
        # 48 字节的字符串不能解析为 96 字节的签名
        with pytest.raises(ParseFromStringError):
            SignatureCompressed.from_str(str(keypair1.public.to_compressed()))


class TestProjectivePoint:

    def test_immutable(self, keypair1):
        with pytest.raises(AttributeError):
            keypair1.public._point = None

    def test_conversions(self, keypair1, messages):
        """每种表示都能转换为同族的其他表示。"""
        sig = keypair1.sign(messages["msg1"])
        affine = sig.to_affine()
        compressed = sig.to_compressed()
        assert isinstance(affine, Signature)
        assert isinstance(compressed, SignatureCompressed)
        assert affine.to_compressed() == compressed
        assert compressed.to_affine() == affine
        assert affine.to_projective() == sig
        assert compressed.to_projective() == sig
        assert bytes(sig) == bytes(affine)

    def test_from_bytes_picks_encoding_by_width(self, keypair1):
        pk = keypair1.public
        assert PubkeyProjective.from_bytes(bytes(pk.to_affine())) == pk
        assert PubkeyProjective.from_bytes(bytes(pk.to_compressed())) == pk
        with pytest.raises(InvalidLengthError):
            PubkeyProjective.from_bytes(bytes(50))

    def test_hash_and_eq(self, keypair1, keypair2):
        """相同的点哈希相同，可用于集合去重。"""
        pk1 = keypair1.public
        again = Pubkey(bytes(pk1.to_affine())).to_projective()
        assert pk1 == again
        assert len({pk1, again, keypair2.public}) == 2

    def test_projective_types_do_not_mix(self, keypair1, messages):
        """签名与所有权证明即使点相同也不相等。"""
        sig = keypair1.sign(messages["msg1"])
        pop = ProofOfPossessionProjective(sig.point)
        assert sig != pop

    def test_coerce_rejects_other_family(self, keypair1):
        """跨类型传参必须抛出 TypeError。"""
        pop = keypair1.proof_of_possession()
        with pytest.raises(TypeError):
            SignatureProjective.coerce(pop)
        with pytest.raises(TypeError):
            SignatureProjective.coerce(pop.to_compressed())
        with pytest.raises(TypeError):
            PubkeyProjective.coerce(ProofOfPossession(bytes(pop.to_affine())))
        with pytest.raises(TypeError):
            PubkeyProjective.coerce(bytes(keypair1.public.to_compressed()))

    def test_pickle(self, keypair1):
        pk = keypair1.public
        assert pickle.loads(pickle.dumps(pk)) == pk

    def test_identity(self):
        """无穷远点只作为聚合起点，编码后默认不能解码。"""
        ident = SignatureProjective.identity()
        assert ident.is_identity()
        assert bytes(ident.to_affine())[0] == 0x40
        assert SignatureProjective.from_bytes(bytes(ident.to_compressed()), allow_identity=True) == ident
