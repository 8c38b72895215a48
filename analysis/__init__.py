"""
Analysis app: prompt orchestration and response normalization for resume
analysis and the generation features built on it.
"""
