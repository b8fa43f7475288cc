from __future__ import annotations
import argparse, json, logging
import numpy as np
from .lag import compute_lags, DEFAULT_EPSILON
from .circular import circular_lags, enumerate_lags, enumerate_lag_table, resolve_shifts
from .config import LagConfig, PRESETS, MODES, config_from_dict, load_config

def build_parser():
    p = argparse.ArgumentParser(prog="circlag", description="Circular lags between two event sequences")
    p.add_argument("-v", "--verbose", action="store_true", help="Log at DEBUG level")
    sub = p.add_subparsers(dest="cmd", required=True)

    pw = sub.add_parser("pairwise", help="Pairwise differences u - v within epsilon (no shifting)")
    pw.add_argument("--u", nargs="*", type=float, required=True, help="Event times of the shifted sequence")
    pw.add_argument("--v", nargs="*", type=float, required=True, help="Event times of the fixed sequence")
    pw.add_argument("--epsilon", type=float, default=DEFAULT_EPSILON, help="Inclusion threshold |u_i - v_j| <= epsilon")
    pw.add_argument("--sort", action="store_true", help="Sort lags before printing")

    c = sub.add_parser("circular", help="Lags over every cyclic shift of u against v")
    c.add_argument("--u", nargs="*", type=float, required=True)
    c.add_argument("--v", nargs="*", type=float, required=True)
    c.add_argument("--preset", choices=PRESETS.keys(), default=None, help="Start from a named configuration")
    c.add_argument("--config", help="JSON file with LagConfig fields")
    c.add_argument("--mode", choices=MODES, default=None,
                   help="auto: period=floor(max)+1, unit steps; parameterized: period=T+dt, t0..T inclusive")
    c.add_argument("--epsilon", type=float, default=None)
    c.add_argument("--t0", type=float, default=None, help="First shift offset (parameterized mode)")
    c.add_argument("--T", type=float, default=None, help="Last shift offset (parameterized mode)")
    c.add_argument("--dt", type=float, default=None, help="Shift step (parameterized mode)")
    c.add_argument("--sort", action="store_true", help="Sort lags before printing")
    c.add_argument("--table", action="store_true", help="Include per-lag shift/index provenance")
    return p

def _resolve_config(a) -> LagConfig:
    cfg = PRESETS[a.preset] if a.preset else LagConfig()
    if a.config:
        cfg = load_config(a.config, base=cfg)
    flags = {k: getattr(a, k) for k in ("mode", "epsilon", "t0", "T", "dt") if getattr(a, k) is not None}
    return config_from_dict(flags, base=cfg)

def main(argv=None):
    ap = build_parser()
    a = ap.parse_args(argv)
    if a.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    if a.cmd == "pairwise":
        lags = compute_lags(a.u, a.v, a.epsilon)
        if a.sort:
            lags = np.sort(lags)
        print(json.dumps({"lags": lags.tolist(), "n_lags": int(lags.size)}))
    elif a.cmd == "circular":
        try:
            cfg = _resolve_config(a)
            policy = cfg.policy()
            period, offsets, table = None, [], None
            if a.u and a.v:
                # resolve once; lags and table share the same shifts
                period, offsets = resolve_shifts(a.u, a.v, policy)
                lags = enumerate_lags(a.u, a.v, period, offsets, cfg.epsilon)
                if a.table:
                    table = enumerate_lag_table(a.u, a.v, period, offsets, cfg.epsilon)
            else:
                lags = circular_lags(a.u, a.v, policy, cfg.epsilon)
        except (ValueError, FileNotFoundError) as e:
            raise SystemExit(str(e))
        res = {
            "mode": cfg.mode,
            "epsilon": cfg.epsilon,
            "period": period,
            "n_shifts": len(offsets),
            "n_lags": int(lags.size),
            "lags": (np.sort(lags) if a.sort else lags).tolist(),
        }
        if a.table:
            res["table"] = table.to_dict(orient="records") if table is not None else []
        print(json.dumps(res, indent=2))

if __name__ == "__main__":
    main()
