"""HTTP server package — webhook endpoint, job lifecycle, render pipeline.

WHY: Jobs arrive as Supabase database webhooks. This package turns each
webhook into a rendered, published clip and a final job status.

HOW: app.py defines the FastAPI routes, models.py the request/response
schemas, jobs.py the status lifecycle, pipeline.py the render stages.
"""
