"""Compare cluster assignments against the astroturf ground truth labelling."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Union

import numpy as np
import pandas as pd
from sklearn.metrics import confusion_matrix, precision_recall_fscore_support

from docketcluster.data.loaders import documents_to_frame, validate_columns
from docketcluster.data.types import ASSIGNMENT_COLUMNS, NOISE_LABEL, ClusterAssignment, Document
from docketcluster.errors import InputSchemaError

ORGANIC_LEVELS = {'', 'organic', '0', '0.0', 'false', 'none', 'nan'}

AssignmentSource = Union[pd.DataFrame, Iterable[ClusterAssignment]]
DocumentTable = Union[pd.DataFrame, Iterable[Document]]


@dataclass
class ClusterEvaluation:
    confusion: np.ndarray
    precision: float
    recall: float
    f1: float
    n_documents: int
    n_clusters: int
    noise_fraction: float
    per_cluster: pd.DataFrame

    def as_dict(self) -> Dict[str, float]:
        tn, fp, fn, tp = (int(value) for value in self.confusion.ravel())
        return {
            'n_documents': self.n_documents,
            'n_clusters': self.n_clusters,
            'noise_fraction': self.noise_fraction,
            'precision': self.precision,
            'recall': self.recall,
            'f1': self.f1,
            'true_negative': tn,
            'false_positive': fp,
            'false_negative': fn,
            'true_positive': tp,
        }


def _assignment_frame(assignments: AssignmentSource) -> pd.DataFrame:
    if isinstance(assignments, pd.DataFrame):
        validate_columns(assignments, ASSIGNMENT_COLUMNS, source='cluster table')
        frame = assignments.copy()
    else:
        frame = pd.DataFrame(
            [
                {
                    'docid': item.docid,
                    'cluster': item.cluster,
                    'membership_prob': item.membership_prob,
                    'outlier_scores': item.outlier_score,
                }
                for item in assignments
            ],
            columns=ASSIGNMENT_COLUMNS,
        )
    frame['docid'] = frame['docid'].astype(str)
    return frame


def _document_frame(documents: DocumentTable) -> pd.DataFrame:
    frame = documents.copy() if isinstance(documents, pd.DataFrame) else documents_to_frame(documents)
    validate_columns(frame, ['docid'], source='document table')
    frame['docid'] = frame['docid'].astype(str)
    return frame


def _level_is_astroturf(value) -> bool:
    return str(value).strip().lower() not in ORGANIC_LEVELS


def ground_truth_labels(documents: DocumentTable) -> pd.Series:
    """Boolean astroturf label per docid; documents without a label are dropped."""
    frame = _document_frame(documents)
    if 'is_astroturf' in frame.columns and frame['is_astroturf'].notna().any():
        known = frame.dropna(subset=['is_astroturf'])
        labels = known['is_astroturf'].map(_level_is_astroturf)
    elif 'level_0' in frame.columns:
        known = frame.dropna(subset=['level_0'])
        labels = known['level_0'].map(_level_is_astroturf)
    else:
        raise InputSchemaError(['is_astroturf'], source='document table')
    return pd.Series(labels.to_numpy(dtype=bool), index=known['docid'].to_numpy(), name='is_astroturf')


def predict_astroturf(assignments: AssignmentSource) -> pd.Series:
    """A comment is flagged as astroturf when it falls in any non-noise cluster."""
    frame = _assignment_frame(assignments)
    return pd.Series(
        (frame['cluster'] != NOISE_LABEL).to_numpy(),
        index=frame['docid'].to_numpy(),
        name='predicted_astroturf',
    )


def _per_cluster(merged: pd.DataFrame) -> pd.DataFrame:
    aggregations = {
        'size': ('docid', 'count'),
        'astroturf_share': ('truth', 'mean'),
        'mean_membership_prob': ('membership_prob', 'mean'),
    }
    if 'dupe_count' in merged.columns and merged['dupe_count'].notna().any():
        aggregations['total_dupe_count'] = ('dupe_count', 'sum')
    summary = merged.groupby('cluster').agg(**aggregations).reset_index()
    return summary.sort_values(['size', 'cluster'], ascending=[False, True]).reset_index(drop=True)


def evaluate_clusters(assignments: AssignmentSource, documents: DocumentTable) -> ClusterEvaluation:
    frame = _assignment_frame(assignments)
    docs = _document_frame(documents)
    unknown = set(frame['docid']) - set(docs['docid'])
    if unknown:
        raise ValueError(f'{len(unknown)} clustered docids are missing from the document table')
    truth = ground_truth_labels(docs)
    merged = frame.merge(docs.drop(columns=['text_data'], errors='ignore'), on='docid', how='left')
    merged = merged[merged['docid'].isin(truth.index)].copy()
    if merged.empty:
        raise ValueError('None of the clustered documents carry a ground truth label')
    merged['truth'] = merged['docid'].map(truth).astype(bool)
    merged['predicted'] = merged['cluster'] != NOISE_LABEL

    y_true = merged['truth'].to_numpy()
    y_pred = merged['predicted'].to_numpy()
    confusion = confusion_matrix(y_true, y_pred, labels=[False, True])
    precision, recall, f1, _ = precision_recall_fscore_support(
        y_true, y_pred, average='binary', pos_label=True, zero_division=0,
    )
    n_documents = len(merged)
    clusters = set(merged['cluster']) - {NOISE_LABEL}
    noise = float((~merged['predicted']).mean()) if n_documents else 0.0
    return ClusterEvaluation(
        confusion=confusion,
        precision=float(precision),
        recall=float(recall),
        f1=float(f1),
        n_documents=n_documents,
        n_clusters=len(clusters),
        noise_fraction=noise,
        per_cluster=_per_cluster(merged),
    )


def compare_models(results: Mapping[str, ClusterEvaluation]) -> pd.DataFrame:
    rows = [{'model': model, **evaluation.as_dict()} for model, evaluation in results.items()]
    frame = pd.DataFrame(rows)
    if frame.empty:
        return frame
    return frame.sort_values('f1', ascending=False).reset_index(drop=True)


__all__ = [
    'ClusterEvaluation',
    'ground_truth_labels',
    'predict_astroturf',
    'evaluate_clusters',
    'compare_models',
]
