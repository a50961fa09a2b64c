from flask import Blueprint

from .responses import api_response

bp = Blueprint("health", __name__)

@bp.get("/health-check")
def health_check():
    """
    Health check
    ---
    tags:
      - Health
    responses:
      200:
        description: API is up
        schema:
          type: object
          properties:
            statusCode:
              type: integer
              example: 200
            data:
              type: object
              properties:
                status:
                  type: string
                  example: ok
            message:
              type: string
              example: Health check passed
            success:
              type: boolean
              example: true
    """
    return api_response({"status": "ok", "version": "1.0.0"}, "Health check passed")
