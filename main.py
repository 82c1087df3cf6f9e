# Grassmann: Exterior Algebra Kernel
# Copyright (C) 2026 The Grassmann Authors
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.

"""Grassmann CLI Entry Point.

Builds two weighted generators and walks them through every element
operator, logging each result.

    python main.py algebra.n=4 demo.a=1.5
"""

import hydra
import torch
from omegaconf import DictConfig, OmegaConf

import log
from core.algebra import GrassmannAlgebra

logger = log.get_logger(__name__)


def check_dense(algebra: GrassmannAlgebra, results: dict, A, B) -> bool:
    """Compares the sparse results against the dense backend."""
    a, b = A.to_tensor(), B.to_tensor()
    dense = {
        'A | B': algebra.wedge(a, b),
        'A & A': algebra.meet(a, a),
        '~A': algebra.dagger(a),
    }
    ok = True
    for label, expected in dense.items():
        if not torch.allclose(results[label].to_tensor(), expected):
            logger.error("Dense mismatch for %s: %s", label, expected.tolist())
            ok = False
    return ok


def run(cfg: DictConfig) -> dict:
    """Runs the demo described by *cfg*.

    Args:
        cfg (DictConfig): Needs ``algebra.n`` (at least 3) and ``demo.a``/``demo.b``.

    Returns:
        dict: Label -> Element for every logged result.
    """
    n = cfg.algebra.n
    if n < 3:
        raise ValueError(f"The demo needs at least 3 generators, got algebra.n={n}")

    algebra = GrassmannAlgebra(n, device=cfg.algebra.get('device', 'cpu'))
    P0, P1, P2 = (algebra.generator(k) for k in range(3))
    A = cfg.demo.a * P0
    B = cfg.demo.b * P1

    results = {
        '(A + B) / 2': (A + B) / 2,
        'A - B': A - B,
        'A | B': A | B,
        'A & A': A & A,
        '~A': ~A,
        '(P0 | P1) & (P1 | P2)': ((P0 | P1) & (P1 | P2)).trim(),
        'P0 | P1 | P2 | (P0 + P1 + P2)': (P0 | P1 | P2 | (P0 + P1 + P2)).trim(),
    }
    for label, value in results.items():
        logger.info("%s = %s", label, value)

    if cfg.demo.get('check_dense', True):
        if n > GrassmannAlgebra.MAX_DENSE_N:
            logger.warning("Skipping dense check: n=%d exceeds %d", n, GrassmannAlgebra.MAX_DENSE_N)
        elif check_dense(algebra, results, A, B):
            logger.info("Dense backend agrees with sparse results")

    return results


@hydra.main(version_base=None, config_path="conf", config_name="config")
def main(cfg: DictConfig):
    log.configure(level=cfg.get('log_level'), force=True)
    logger.debug("Config:\n%s", OmegaConf.to_yaml(cfg))
    run(cfg)


if __name__ == "__main__":
    main()
