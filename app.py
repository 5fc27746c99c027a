from flask import Flask, jsonify, request, session
from functools import wraps
from config import Config
import db_routines
import ai_program
import program_reconciler
from program_types import (
    InvalidParamsError,
    params_from_dict,
    program_to_dict,
    program_from_dict,
    routine_to_dict,
)

app = Flask(__name__)
app.config.from_object(Config)

# ============================================
# AUTH HELPERS
# ============================================

def get_current_user():
    """Get the current logged-in user from session."""
    return session.get('user')


def api_login_required(f):
    """Decorator to require a session user on JSON routes."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not get_current_user():
            return jsonify({'error': 'Not authenticated'}), 401
        return f(*args, **kwargs)
    return decorated_function


# ============================================
# PROGRAM GENERATION ROUTES
# ============================================

@app.route('/api/program/ai-status')
def api_program_ai_status():
    """Whether programs will come from the AI service or from templates."""
    return jsonify({
        'configured': ai_program.is_ai_configured(),
        'model': ai_program.AI_PROGRAM_CONFIG['model']
    })


@app.route('/api/program/generate', methods=['POST'])
@api_login_required
def api_generate_program():
    """Generate a program and return it for preview. Always succeeds for valid params."""
    try:
        params = params_from_dict(request.get_json(silent=True))
    except InvalidParamsError as e:
        return jsonify({'error': str(e)}), 400

    program = ai_program.generate_program(params)
    result = program_to_dict(program)
    result['summary'] = f"{program.name} - {len(program.workouts)} workouts"
    return jsonify(result)


@app.route('/api/program/generate/start', methods=['POST'])
@api_login_required
def api_start_generation():
    """Start a background generation and return its task id."""
    try:
        params = params_from_dict(request.get_json(silent=True))
    except InvalidParamsError as e:
        return jsonify({'error': str(e)}), 400

    task_id = ai_program.generation_tasks.submit(params)
    return jsonify({'task_id': task_id}), 202


@app.route('/api/program/generate/<task_id>', methods=['GET'])
@api_login_required
def api_generation_status(task_id):
    """Poll a background generation."""
    tasks = ai_program.generation_tasks
    try:
        status = tasks.status(task_id)
    except ai_program.UnknownTaskError:
        return jsonify({'error': 'Task not found'}), 404

    if status == 'abandoned':
        tasks.forget(task_id)
        return jsonify({'status': 'abandoned'})
    if status != 'done':
        return jsonify({'status': status})

    program = tasks.result(task_id)
    tasks.forget(task_id)
    if program is None:
        return jsonify({'status': 'abandoned'})
    return jsonify({'status': 'done', 'program': program_to_dict(program)})


@app.route('/api/program/generate/<task_id>', methods=['DELETE'])
@api_login_required
def api_abandon_generation(task_id):
    """Stop waiting for a generation. The request already sent keeps running."""
    try:
        ai_program.generation_tasks.abandon(task_id)
    except ai_program.UnknownTaskError:
        return jsonify({'error': 'Task not found'}), 404
    return jsonify({'status': 'abandoned'})


# ============================================
# PROGRAM SAVE / ROUTINE ROUTES
# ============================================

@app.route('/api/program/save', methods=['POST'])
@api_login_required
def api_save_program():
    """Import a confirmed program as routines."""
    user = get_current_user()

    try:
        program = program_from_dict(request.get_json(silent=True) or {})
    except (KeyError, TypeError, ValueError) as e:
        return jsonify({'error': f'Invalid program: {e}'}), 400

    try:
        routines = program_reconciler.reconcile_and_save(program, user['id'])
    except program_reconciler.ProgramSaveError as e:
        print(f"Save program error: {e}")
        return jsonify({
            'error': 'Failed to save program. Please try again.',
            'details': str(e),
            'created_routine_ids': [r.id for r in e.created_routines]
        }), 500

    return jsonify({
        'success': True,
        'program_id': routines[0].program_id if routines else None,
        'routines': [routine_to_dict(r) for r in routines],
        'message': f"{program.name} with {len(program.workouts)} workouts has been added to your routines."
    })


@app.route('/api/programs')
@api_login_required
def api_programs():
    """List the user's routines grouped by generated program."""
    user = get_current_user()

    try:
        routines = db_routines.get_user_routines(user['id'])
    except Exception as e:
        print(f"Load routines error: {e}")
        return jsonify({'error': str(e)}), 500

    programs, standalone = program_reconciler.group_routines_by_program(routines)
    return jsonify({
        'programs': [
            {
                'program_id': p['program_id'],
                'name': p['name'],
                'routines': [routine_to_dict(r) for r in p['routines']]
            }
            for p in programs
        ],
        'standalone': [routine_to_dict(r) for r in standalone]
    })


@app.route('/api/programs/<path:program_id>', methods=['GET'])
@api_login_required
def api_program_detail(program_id):
    """Load the routines of one generated program."""
    user = get_current_user()

    try:
        routines = db_routines.get_program_routines(user['id'], program_id)
    except Exception as e:
        print(f"Load program error: {e}")
        return jsonify({'error': str(e)}), 500

    if not routines:
        return jsonify({'error': 'Program not found'}), 404
    return jsonify({
        'program_id': program_id,
        'name': program_reconciler.parse_program_grouping_key(program_id) or 'Unknown Program',
        'routines': [routine_to_dict(r) for r in routines]
    })


@app.route('/api/programs/<path:program_id>', methods=['DELETE', 'POST'])
@api_login_required
def api_delete_program(program_id):
    """Delete every routine created from one generated program."""
    user = get_current_user()

    try:
        deleted = db_routines.delete_program_routines(user['id'], program_id)
    except Exception as e:
        print(f"Delete program error: {e}")
        return jsonify({'error': str(e)}), 500

    if deleted == 0:
        return jsonify({'error': 'Program not found'}), 404
    return jsonify({'success': True, 'deleted': deleted})


if __name__ == '__main__':
    app.run(debug=True, host='0.0.0.0', port=5000)
