import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from docketcluster.vectorize.weighting import WeightMeasure

ARTIFACTS_ENV_VAR = 'DOCKETCLUSTER_ARTIFACTS'
VECTORIZERS = ('word', 'pos')


def _default_artifacts_dir() -> str:
    return os.getenv(ARTIFACTS_ENV_VAR, 'artifacts')


@dataclass
class PipelineConfig:
    # Sampling
    sample_size: int = 1000
    seed: int = 42

    # Vectorization
    vectorizer: str = 'word'  # "word" | "pos"
    ngram: int = 2
    ngram_min: Optional[int] = None
    measure: str = 'tfidf'  # "tf" | "idf" | "tfidf"
    threshold: float = 0.05

    # Clustering
    min_cluster_size: int = 5
    content_addressed_cache: bool = False

    artifacts_dir: str = field(default_factory=_default_artifacts_dir)

    def __post_init__(self):
        if self.sample_size < 1:
            raise ValueError(f'sample_size must be positive, got {self.sample_size}')
        if self.vectorizer not in VECTORIZERS:
            raise ValueError(f'vectorizer must be one of {VECTORIZERS}, got {self.vectorizer!r}')
        if self.ngram_min is None:
            self.ngram_min = self.ngram
        if self.ngram < 1 or self.ngram_min < 1 or self.ngram_min > self.ngram:
            raise ValueError(f'Invalid n-gram range [{self.ngram_min}, {self.ngram}]')
        self.measure = WeightMeasure.parse(self.measure).value
        if self.threshold < 0:
            raise ValueError(f'threshold must be non-negative, got {self.threshold}')
        if self.min_cluster_size < 2:
            raise ValueError(f'min_cluster_size must be at least 2, got {self.min_cluster_size}')

    @classmethod
    def from_yaml(cls, path: Path) -> 'PipelineConfig':
        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}
        return cls(**data)

    def to_yaml(self, path: Path):
        with open(path, 'w') as f:
            yaml.dump(asdict(self), f, default_flow_style=False)

    @property
    def sample_dir_name(self) -> str:
        return f'{self.sample_size}_{self.seed}'

    @property
    def sample_dir(self) -> Path:
        return Path(self.artifacts_dir) / self.sample_dir_name

    @property
    def model_name(self) -> str:
        # e.g. word_2_tfidf, pos_3_tf; ranges get both ends: word_1-3_tf
        order = str(self.ngram) if self.ngram_min == self.ngram else f'{self.ngram_min}-{self.ngram}'
        return f'{self.vectorizer}_{order}_{self.measure}'

    def replace(self, **changes) -> 'PipelineConfig':
        data = asdict(self)
        if 'ngram' in changes and 'ngram_min' not in changes:
            data['ngram_min'] = None
        data.update(changes)
        return PipelineConfig(**data)


def load_pipeline_config(path: str | Path) -> PipelineConfig:
    return PipelineConfig.from_yaml(Path(path))
