"""Times signing, verification and aggregation over growing validator counts.

Run after `pip install -e .`:

    python evaluation/bench_bls.py [--sizes 64 128 256] [--workers 4]
"""
import argparse
import time

from bls_signatures import Keypair, PubkeyProjective, SignatureProjective

MESSAGE = b"test message"


def _timed(label: str, fn):
    start = time.time()
    result = fn()
    end = time.time()
    print(f"  {label:<32} {(end - start):8.3f} s")
    return result


def bench_single():
    print("\n🚀 单个签名")
    keypair = Keypair.derive(bytes(32))
    signature = _timed("sign", lambda: keypair.sign(MESSAGE))
    _timed("verify", lambda: signature.verify(keypair.public, MESSAGE))
    _timed("proof_of_possession", keypair.proof_of_possession)


def bench_aggregation(n: int, workers: int):
    print(f"\n🚀 {n} 个验证者")
    keypairs = [Keypair.derive(i.to_bytes(32, "big")) for i in range(n)]
    pubkeys = [kp.public for kp in keypairs]
    signatures = [kp.sign(MESSAGE) for kp in keypairs]
    messages = [MESSAGE + i.to_bytes(4, "big") for i in range(n)]
    distinct_signatures = [kp.sign(m) for kp, m in zip(keypairs, messages)]

    _timed("aggregate pubkeys", lambda: PubkeyProjective.aggregate(pubkeys))
    _timed("par_aggregate pubkeys",
           lambda: PubkeyProjective.par_aggregate(pubkeys, max_workers=workers))
    _timed("aggregate signatures", lambda: SignatureProjective.aggregate(signatures))
    _timed("par_aggregate signatures",
           lambda: SignatureProjective.par_aggregate(signatures, max_workers=workers))
    _timed("verify_aggregate",
           lambda: SignatureProjective.verify_aggregate(pubkeys, signatures, MESSAGE))
    _timed("verify_distinct",
           lambda: SignatureProjective.verify_distinct(pubkeys, distinct_signatures, messages))
    _timed("par_verify_distinct",
           lambda: SignatureProjective.par_verify_distinct(
               pubkeys, distinct_signatures, messages, max_workers=workers))


def main():
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--sizes", type=int, nargs="+", default=[64, 128, 256])
    parser.add_argument("--workers", type=int, default=None)
    args = parser.parse_args()

    bench_single()
    for n in args.sizes:
        bench_aggregation(n, args.workers)


if __name__ == "__main__":
    main()
