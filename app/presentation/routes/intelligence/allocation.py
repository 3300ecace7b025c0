"""
Allocation proposal routes
"""

from flask import current_app, jsonify, request
from app.buisness.core.engine_context import EngineContext
from app.buisness.intelligence.allocation_engine import AllocationProposalEngine
from app.presentation.routes.intelligence import bp, require_int_arg


@bp.route('/allocation/propose', methods=['GET'])
def propose_allocation():
    variant_id = require_int_arg(request.args, 'variant_id')
    engine = AllocationProposalEngine(EngineContext.from_app(current_app))
    return jsonify(engine.propose(variant_id).to_dict())


@bp.route('/allocation/candidates', methods=['GET'])
def allocation_candidates():
    engine = AllocationProposalEngine(EngineContext.from_app(current_app))
    return jsonify({'variants': engine.variants_needing_allocation()})
