"""
Request dependencies for the API.

``get_pipeline()`` hands routes the application's ``ChartPipeline`` after
making sure it has run.  The first request triggers the single fetch when
startup did not already do it; the pipeline lock keeps concurrent first
requests from fetching twice.
"""

from fastapi import Request

from chart.pipeline import ChartPipeline


def get_pipeline(request: Request) -> ChartPipeline:
    """Return the app's pipeline, loading and drawing it on first use."""
    pipeline: ChartPipeline = request.app.state.pipeline
    pipeline.run()
    return pipeline
