from .types import ASSIGNMENT_COLUMNS, NOISE_LABEL, ClusterAssignment, Document, NgramCell

__all__ = ['Document', 'NgramCell', 'ClusterAssignment', 'NOISE_LABEL', 'ASSIGNMENT_COLUMNS']
