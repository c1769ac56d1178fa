"""Walks through key registration and aggregate verification for a small committee."""
import tempfile
from pathlib import Path

from bls_signatures import (
    Keypair,
    ProofOfPossessionCompressed,
    ProofOfPossessionProjective,
    PubkeyCompressed,
    PubkeyProjective,
    SignatureProjective,
)


def main():
    # ==========================================================================
    # 1. 生成验证者密钥对并发布 (公钥, 所有权证明)
    # ==========================================================================
    print("\n🚀 步骤 1: 生成密钥对...")
    keypairs = [Keypair.derive(bytes([i + 1]) * 32) for i in range(3)]
    registrations = [
        (str(kp.public.to_compressed()), str(kp.proof_of_possession().to_compressed()))
        for kp in keypairs
    ]
    for pubkey, _ in registrations:
        print(f"✅ 公钥: {pubkey[:20]}...")

    # ==========================================================================
    # 2. 注册时一次性校验所有权证明
    # ==========================================================================
    print("\n🚀 步骤 2: 校验所有权证明...")
    pubkeys = [PubkeyCompressed.from_str(pk).to_projective() for pk, _ in registrations]
    proofs = [ProofOfPossessionCompressed.from_str(pop) for _, pop in registrations]
    print(f"✅ 批量校验结果: {ProofOfPossessionProjective.batch_verify(pubkeys, proofs)}")

    # ==========================================================================
    # 3. 对同一消息签名并聚合
    # ==========================================================================
    print("\n🚀 步骤 3: 聚合签名...")
    vote = b"epoch-42-vote"
    aggregate = SignatureProjective.aggregate([kp.sign(vote) for kp in keypairs])
    print(f"✅ 聚合签名: {str(aggregate.to_compressed())[:20]}...")
    print(f"✅ 快速聚合验证: {SignatureProjective.fast_aggregate_verify(pubkeys, vote, aggregate)}")
    print(f"✅ 聚合公钥: {str(PubkeyProjective.aggregate(pubkeys).to_compressed())[:20]}...")

    # ==========================================================================
    # 4. 保存并重新加载密钥文件
    # ==========================================================================
    print("\n🚀 步骤 4: 保存密钥文件...")
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "validator-0.json"
        keypairs[0].write_json_file(path)
        reloaded = Keypair.read_json_file(path)
        print(f"✅ 重新加载后一致: {reloaded == keypairs[0]}")


if __name__ == "__main__":
    main()
