# test_keypair.py
import io
import json
import os
import stat

import pytest
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

from bls_signatures import (
    BLS_KEYPAIR_SIZE,
    InvalidLengthError,
    KeyDerivationError,
    Keypair,
    ParseFromBytesError,
    PubkeyProjective,
    SecretKey,
)


class TestKeypair:

    def test_public_matches_secret(self, keypair1):
        """公钥总是由私钥重新计算得到。"""
        assert keypair1.public == PubkeyProjective.from_secret(keypair1.secret)
        assert Keypair.from_secret(keypair1.secret) == keypair1

    def test_derive_is_deterministic(self):
        assert Keypair.derive(bytes([5]) * 32) == Keypair.derive(bytes([5]) * 32)

    def test_derive_from_signer(self):
        signer = Ed25519PrivateKey.from_private_bytes(bytes([11]) * 32)
        kp = Keypair.derive_from_signer(signer, b"seed")
        assert kp.secret == SecretKey.derive_from_signer(signer, b"seed")
        assert kp.sign(b"msg").verify(kp.public, b"msg")

    def test_immutable(self, keypair1):
        with pytest.raises(AttributeError):
            keypair1.public = PubkeyProjective.identity()

    def test_repr_hides_secret(self, keypair1):
        assert str(keypair1.secret.scalar) not in repr(keypair1)
        assert repr(keypair1).startswith("Keypair(public=")

    def test_zero_secret_rejected(self):
        """零私钥可以解码，但不能构成密钥对。"""
        zero = SecretKey.from_bytes(bytes(32))
        assert zero.scalar == 0
        with pytest.raises(KeyDerivationError):
            Keypair(zero)
        with pytest.raises(KeyDerivationError):
            Keypair.from_bytes(bytes(32) + bytes([0x40]) + bytes(95))


class TestKeypairBytes:

    def test_roundtrip(self, keypair1):
        """测试 128 字节编码的往返。"""
        data = bytes(keypair1)
        assert len(data) == BLS_KEYPAIR_SIZE == 128
        assert data[:32] == bytes(keypair1.secret)
        assert data[32:] == bytes(keypair1.public.to_affine())
        assert Keypair.from_bytes(data) == keypair1

    def test_wrong_length(self, keypair1):
        with pytest.raises(InvalidLengthError):
            Keypair.from_bytes(bytes(keypair1)[:-1])

    def test_mismatched_pubkey(self, keypair1, keypair2):
        """公钥与私钥不匹配时必须拒绝。"""
        data = bytes(keypair1.secret) + bytes(keypair2.public.to_affine())
        with pytest.raises(ParseFromBytesError):
            Keypair.from_bytes(data)


class TestKeypairJson:

    def test_json_roundtrip(self, keypair1):
        document = keypair1.to_json()
        assert json.loads(document) == list(bytes(keypair1))
        assert Keypair.from_json(document) == keypair1

    def test_stream_roundtrip(self, keypair1):
        buf = io.StringIO()
        written = keypair1.write_json(buf)
        assert buf.getvalue() == written
        buf.seek(0)
        assert Keypair.read_json(buf) == keypair1

    def test_file_roundtrip(self, keypair1, tmp_path):
        """写入文件时创建父目录，且文件权限为 0o600。"""
        path = tmp_path / "keys" / "nested" / "validator.json"
        keypair1.write_json_file(path)
        assert path.exists()
        assert stat.S_IMODE(os.stat(path).st_mode) == 0o600
        assert Keypair.read_json_file(path) == keypair1
        assert Keypair.read_json_file(str(path)) == keypair1

    def test_file_overwrite_restricts_mode(self, keypair1, keypair2, tmp_path):
        """覆盖已存在的文件时也必须将权限收紧为 0o600。"""
        path = tmp_path / "validator.json"
        path.write_text("[]")
        os.chmod(path, 0o644)
        keypair1.write_json_file(path)
        assert stat.S_IMODE(os.stat(path).st_mode) == 0o600, "已有文件的权限未被收紧"
        assert Keypair.read_json_file(path) == keypair1

        keypair2.write_json_file(path)
        assert Keypair.read_json_file(path) == keypair2

    @pytest.mark.parametrize("document", [
        "not json",
        "{}",
        json.dumps([0] * 127),
        json.dumps([256] + [0] * 127),
        json.dumps([-1] + [0] * 127),
        json.dumps([True] + [0] * 127),
        json.dumps(["1"] + [0] * 127),
    ])
    def test_invalid_json(self, document):
        """非法的 JSON 内容必须抛出 ParseFromBytesError。"""
        with pytest.raises(ParseFromBytesError):
            Keypair.from_json(document)
