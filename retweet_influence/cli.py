from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError
from tqdm import tqdm

from retweet_influence.config import RunConfig, dump_config, load_config
from retweet_influence.diffusion import CascadeModel
from retweet_influence.exceptions import ConfigError, InfluencerError
from retweet_influence.io import (
    cascade_output_path,
    load_edge_list,
    write_cascade_result,
    write_influencer_report,
)

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="retweet-influence",
        description="Find influencers in a retweet network and model how a behavior cascades from them",
    )
    parser.add_argument("edge_file", help="Edge list with one 'from to [weight]' retweet per line")
    parser.add_argument("--config", help="Path to config YAML")
    parser.add_argument("--influencers", type=int, default=None, help="How many influencers to find")
    parser.add_argument("--generations", type=int, default=None, help="Maximum cascade generations")
    parser.add_argument("--reward-inertia", type=int, default=None, help="Reward for keeping the old behavior")
    parser.add_argument("--reward-change", type=int, default=None, help="Reward for adopting the new behavior")
    parser.add_argument("--seeding", choices=["one", "all"], default=None,
                        help="Seed influencers one at a time or all concurrently")
    parser.add_argument("--paths", action="store_true", help="Report shortest paths to each influencer")
    parser.add_argument("--weighted", action="store_true", help="Edge list has a third weight column")
    parser.add_argument("--out", default=None, help="Output directory")
    parser.add_argument("-v", "--verbose", action="count", default=0)
    return parser.parse_args(argv)


def override_config(cfg: RunConfig, args: argparse.Namespace) -> RunConfig:
    updates = {
        "influencers": args.influencers,
        "generations": args.generations,
        "reward_for_inertia": args.reward_inertia,
        "reward_for_change": args.reward_change,
        "seeding": args.seeding,
        "output_dir": args.out,
    }
    updates = {key: value for key, value in updates.items() if value is not None}
    if args.paths:
        updates["find_paths"] = True
    if args.weighted:
        updates["weighted"] = True
    try:
        return RunConfig.model_validate({**cfg.model_dump(), **updates})
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc


def run(cfg: RunConfig, edge_file: str) -> List[Path]:
    """Runs influencer extraction and the cascades, returning the files written."""
    input_name = Path(edge_file).stem
    out_dir = Path(cfg.output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    dump_config(cfg, out_dir / "config_resolved.yaml")

    graph = load_edge_list(edge_file, weighted=cfg.weighted).deep_copy()

    influencer_graphs = graph.get_influencer_graphs(cfg.influencers)
    influencers = [influencer_graph.influencer for influencer_graph in influencer_graphs]
    for influencer_graph in influencer_graphs:
        if influencer_graph.reach() == 0:
            logger.warning(f"Influencer {influencer_graph.influencer} has no reach.")

    written = [write_influencer_report(out_dir / f"InfluencerInfoFrom{input_name}.txt", graph,
                                       influencer_graphs, include_paths=cfg.find_paths)]

    logger.info(f"Preparing to run the cascade model for {graph}")
    model = CascadeModel(graph)
    if cfg.seeding == "one":
        for influencer in tqdm(influencers, desc="Cascading from influencers"):
            result = model.simulate(cfg.generations, influencer, cfg.reward_for_inertia, cfg.reward_for_change)
            written.append(write_cascade_result(result, cascade_output_path(out_dir, [influencer], input_name)))
    else:
        result = model.simulate(cfg.generations, influencers, cfg.reward_for_inertia, cfg.reward_for_change)
        written.append(write_cascade_result(result, cascade_output_path(out_dir, influencers, input_name)))
    return written


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    level = logging.DEBUG if args.verbose > 1 else logging.INFO if args.verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        cfg = load_config(args.config) if args.config else RunConfig()
        cfg = override_config(cfg, args)
        written = run(cfg, args.edge_file)
    except InfluencerError as e:
        logger.error(str(e))
        return 1

    for file_path in written:
        print(file_path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
