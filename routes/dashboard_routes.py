from flask import Blueprint

from common.decorators import admin_required
from controllers.dashboard_controller import DashboardController

dashboard_bp = Blueprint('dashboard', __name__, url_prefix='/api/dashboard')


@dashboard_bp.route('/summary', methods=['GET'])
@admin_required
def get_summary():
    """
    Record counts shown on the dashboard home page.
    ---
    tags:
      - Dashboard
    security:
      - Bearer: []
    responses:
      200:
        description: Counts
        schema:
          type: object
          properties:
            data:
              type: object
              properties:
                merchants:
                  type: integer
                published_merchants:
                  type: integer
                coupons:
                  type: integer
                top_coupons:
                  type: integer
                blogs:
                  type: integer
                tags:
                  type: integer
      401:
        description: Missing or invalid token
    """
    return DashboardController.get_summary()
