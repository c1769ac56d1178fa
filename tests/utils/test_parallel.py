# test_parallel.py
from py_ecc.optimized_bls12_381 import FQ12, G1, G2, Z1, Z2, final_exponentiate, multiply

from bls_signatures.utils import curve, parallel
from bls_signatures.utils.hash import hash_message_to_point


class TestSharding:

    def test_chunks(self):
        """测试分块大小均匀且保持顺序。"""
        assert parallel._chunks(list(range(5)), 2) == [[0, 1, 2], [3, 4]]
        assert parallel._chunks([1], 3) == [[1]]
        assert parallel._chunks(list(range(6)), 3) == [[0, 1], [2, 3], [4, 5]]

    def test_worker_count(self):
        assert parallel._worker_count(3, 8) == 3
        assert parallel._worker_count(10, 2) == 2
        assert parallel._worker_count(0, 4) == 1


class TestParallelArithmetic:

    def test_par_sum_points_matches_sequential(self):
        """并行求和结果必须与顺序求和一致。"""
        points = [multiply(G1, k) for k in range(1, 8)]
        expected = curve.sum_points(points, Z1)
        assert curve.points_equal(parallel.par_sum_points(points, Z1, max_workers=3), expected)

    def test_par_sum_points_g2(self):
        points = [multiply(G2, k) for k in (2, 4, 6)]
        result = parallel.par_sum_points(points, Z2, max_workers=2)
        assert curve.points_equal(result, multiply(G2, 12))

    def test_par_distinct_message_product(self, keypair1, keypair2, messages):
        """并行乘积必须与顺序 Miller 循环乘积在最终幂后一致。"""
        pks = [keypair1.public.point, keypair2.public.point]
        msgs = [messages["msg1"], messages["msg2"]]
        product = parallel.par_distinct_message_product(pks, msgs, max_workers=2)
        expected = curve.miller_loop_product(
            [(hash_message_to_point(m), pk) for pk, m in zip(pks, msgs)]
        )
        assert final_exponentiate(product) == final_exponentiate(expected)
        assert final_exponentiate(product) != FQ12.one()
