#!/usr/bin/env python
"""
Sweep vectorization settings over one comment sample and compare the clusterings
"""

import argparse
import json
import logging
from datetime import datetime
from itertools import product
from pathlib import Path

from docketcluster.config import load_pipeline_config
from docketcluster.data.loaders import read_table
from docketcluster.errors import DegenerateInputError
from docketcluster.eval.metrics import compare_models
from docketcluster.pipeline import run_pipeline

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


def save_metadata(exp_path, config, grid, description=""):
    """Save sweep metadata next to the sample"""
    metadata = {
        "timestamp": datetime.now().isoformat(),
        "description": description,
        "sample": config.sample_dir_name,
        "settings": {
            "threshold": config.threshold,
            "min_cluster_size": config.min_cluster_size,
            "content_addressed_cache": config.content_addressed_cache,
        },
        "grid": grid,
    }
    exp_path.mkdir(parents=True, exist_ok=True)
    with open(exp_path / "sweep_metadata.json", "w") as f:
        json.dump(metadata, f, indent=2)
    return metadata


def run_sweep(base_config, documents, vectorizers, orders, measures):
    """Run the pipeline once per parameter set; returns model -> evaluation"""
    evaluations = {}
    for vectorizer, order, measure in product(vectorizers, orders, measures):
        config = base_config.replace(vectorizer=vectorizer, ngram=order, measure=measure)
        print(f"\n{'='*60}")
        print(f"Running model: {config.model_name}")
        print(f"{'='*60}")
        try:
            result = run_pipeline(config, documents)
        except DegenerateInputError as error:
            # Every gram filtered out at this order
            logger.warning("Skipping %s: %s", config.model_name, error)
            continue
        if result.evaluation is not None:
            evaluations[config.model_name] = result.evaluation
        print(f"✓ {config.model_name}: {result.matrix.n_grams} grams, "
              f"{len(result.assignments)} assignments")
    return evaluations


def main():
    parser = argparse.ArgumentParser(description="Sweep docketcluster models over one sample")
    parser.add_argument("--config", "-c", default="docketcluster/configs/pipeline.yaml",
                        help="Base pipeline configuration")
    parser.add_argument("--input", "-i", required=True, help="Comment dataset (CSV/JSON/Parquet)")
    parser.add_argument("--vectorizers", nargs="+", choices=["word", "pos"], default=["word"])
    parser.add_argument("--orders", nargs="+", type=int, default=[1, 2, 3])
    parser.add_argument("--measures", nargs="+", choices=["tf", "idf", "tfidf"], default=["tf", "tfidf"])
    parser.add_argument("--description", "-d", default="", help="Sweep description")
    args = parser.parse_args()

    config = load_pipeline_config(args.config)
    documents = read_table(args.input)
    grid = {"vectorizers": args.vectorizers, "orders": args.orders, "measures": args.measures}
    save_metadata(config.sample_dir, config, grid, args.description)

    evaluations = run_sweep(config, documents, args.vectorizers, args.orders, args.measures)
    if not evaluations:
        print("No ground truth labels in the sample; nothing to compare")
        return

    table = compare_models(evaluations)
    out = Path(config.sample_dir) / "model_comparison.csv"
    table.to_csv(out, index=False)
    print(f"\n{'='*60}")
    print(table.to_string(index=False))
    print(f"Comparison saved to: {out}")
    print(f"{'='*60}")


if __name__ == "__main__":
    main()
