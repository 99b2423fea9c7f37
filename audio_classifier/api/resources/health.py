from flask_restful import Resource

class HealthCheck(Resource):
    def get(self):
        """Controller: Check API health & list available routes"""
        routes = {
            "status": "healthy",
            "message": "Backend API is running",
            "routes": {
                "/": "Health check & list all routes",
                "/api/auth/register": "Register new user",
                "/api/auth/login": "Login user",
                "/api/auth/me": "Get current user info",
                "/api/users": "List users or change a user's role (admin)",
                "/api/models/<model_id>/metrics": "Get evaluation metrics of a model",
                "/api/models/<model_id>/confusion-matrix": "Get confusion matrix of a model",
                "/api/models/<model_id>/evaluation": "Evaluate a model from labelled predictions (admin)",
            }
        }
        return routes, 200
