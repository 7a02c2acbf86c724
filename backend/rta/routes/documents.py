# Overview: Flask API routes for documents; upload, list, download and delete of the caller's files.

from flask import Blueprint, request, jsonify, g, send_file

from ..decorators import require_auth
from ..services import document_service


documents_bp = Blueprint("documents", __name__, url_prefix="/api/documents")


@documents_bp.post("/upload")
@require_auth
def upload_document_route():
    """Multipart upload, file in field "document"."""
    document = document_service.upload_document(g.session_context, request.files.get("document"))
    return jsonify(document.to_dict()), 201


@documents_bp.get("")
@require_auth
def list_documents_route():
    documents = document_service.list_documents(g.session_context)
    return jsonify([d.to_dict() for d in documents])


@documents_bp.delete("/<int:document_id>")
@require_auth
def delete_document_route(document_id: int):
    document_service.delete_document(g.session_context, document_id)
    return jsonify({"message": "Document deleted successfully"}), 200


@documents_bp.get("/<int:document_id>/download")
@require_auth
def download_document_route(document_id: int):
    document, path = document_service.download_document(g.session_context, document_id)
    return send_file(
        path,
        mimetype=document_service.ALLOWED_TYPES[document.type],
        as_attachment=True,
        download_name=document.name,
    )
