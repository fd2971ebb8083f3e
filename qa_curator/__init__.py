"""
qa-curator: turn unstructured source text into curated question-answer datasets.

Pipeline:
    prompt builder -> resilient transport -> response extractor
    -> structured recovery -> heuristic scoring -> dataset merge
"""

__version__ = "1.0.0"
