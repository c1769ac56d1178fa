# tests/conftest.py
import pytest
from py_ecc.bls.point_compression import modular_squareroot_in_FQ2
from py_ecc.optimized_bls12_381 import FQ, FQ2, b, b2, field_modulus, is_on_curve

from bls_signatures import Keypair


# --- 共享 Fixtures ---
# 密钥对由固定种子派生，保证每次运行结果一致。

@pytest.fixture(scope="module")
def keypair1():
    """提供第一个确定性派生的密钥对。"""
    return Keypair.derive(bytes([1]) * 32)


@pytest.fixture(scope="module")
def keypair2():
    """提供第二个确定性派生的密钥对。"""
    return Keypair.derive(bytes([2]) * 32)


@pytest.fixture(scope="module")
def keypair3():
    """提供第三个确定性派生的密钥对。"""
    return Keypair.derive(bytes([3]) * 32)


@pytest.fixture(scope="module")
def messages():
    """提供一组标准的消息用于测试。"""
    return {
        "msg1": b"Hello, world!",
        "msg2": b"This is a test message.",
        "msg3": b"Another message for aggregation.",
    }


# --- 子群之外的曲线点 ---
# 余因子很大，按最小 x 找到的曲线点几乎不可能落在素数阶子群中。

@pytest.fixture(scope="module")
def g1_off_subgroup():
    """提供一个在 G1 曲线上、但不在素数阶子群中的射影点。"""
    x = 1
    while True:
        rhs = (x ** 3 + 4) % field_modulus
        y = pow(rhs, (field_modulus + 1) // 4, field_modulus)
        if y * y % field_modulus == rhs:
            break
        x += 1
    pt = (FQ(x), FQ(y), FQ.one())
    assert is_on_curve(pt, b)
    return pt


@pytest.fixture(scope="module")
def g2_off_subgroup():
    """提供一个在 G2 扭曲线上、但不在素数阶子群中的射影点。"""
    k = 1
    while True:
        x = FQ2([k, 0])
        y = modular_squareroot_in_FQ2(x ** 3 + b2)
        if y is not None:
            break
        k += 1
    pt = (x, y, FQ2.one())
    assert is_on_curve(pt, b2)
    return pt
