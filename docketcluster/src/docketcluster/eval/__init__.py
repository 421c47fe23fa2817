from .metrics import ClusterEvaluation, compare_models, evaluate_clusters, ground_truth_labels, predict_astroturf

__all__ = [
    'ClusterEvaluation',
    'compare_models',
    'evaluate_clusters',
    'ground_truth_labels',
    'predict_astroturf',
]
