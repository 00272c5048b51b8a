"""
STEMI Detector

Logistic estimate of ST-elevation myocardial infarction probability from ten
clinical features, with per-feature log-odds explanations.
"""
__version__ = "1.0.0"
