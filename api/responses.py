from flask import jsonify


def api_response(data=None, message: str = "Success", status: int = 200):
    """Uniform success envelope: {statusCode, data, message, success}.

    Returns a Response object so callers can still attach cookies.
    """
    payload = {
        "statusCode": status,
        "data": {} if data is None else data,
        "message": message,
        "success": status < 400,
    }
    response = jsonify(payload)
    response.status_code = status
    return response
