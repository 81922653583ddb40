from datetime import date
from typing import Any, Dict, Optional

from flask import Blueprint, jsonify, request

from domain.exceptions import ValidationError


class BaseController:
    """Contrôleur de base avec utilitaires communs"""

    def __init__(self, name: str, url_prefix: str = None):
        self.blueprint = Blueprint(name, __name__, url_prefix=url_prefix)
        self._register_routes()

    def _register_routes(self):
        """À implémenter dans les contrôleurs spécialisés"""
        pass

    def get_json_data(self) -> Dict[str, Any]:
        """Récupère les données JSON de la requête"""
        data = request.get_json(silent=True)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValidationError("JSON object expected")
        return data

    def get_date_arg(self, name: str) -> Optional[date]:
        """Lit un paramètre de requête au format YYYY-MM-DD"""
        value = request.args.get(name)
        if not value:
            return None
        try:
            return date.fromisoformat(value)
        except ValueError:
            raise ValidationError(f"Invalid date for '{name}': {value}", field=name)

    def success_response(self, data: Any = None, message: str = None, status_code: int = 200):
        """Réponse de succès standardisée"""
        response = {'success': True}
        if data is not None:
            response['data'] = data
        if message:
            response['message'] = message
        return jsonify(response), status_code
