import csv
import os
import sys
import time
from datetime import datetime, timedelta
from io import StringIO

from flask import Blueprint, jsonify, request, current_app

from ..models.csv_parser import parse_csv
from ..models.record_filter import FilterCriteria, filter_records, distinct_values
from ..utils.validation import decode_upload, sanitize_input

api_bp = Blueprint('api', __name__)


def _get_dataset_or_404(name):
    dataset = current_app.config['dashboard_state'].get_dataset(name)
    if dataset is None:
        return None, (jsonify({'error': f'Unknown dataset: {name}'}), 404)
    return dataset, None


def _criteria_from_request():
    return FilterCriteria.from_args({
        'severity': sanitize_input(request.args.get('severity', '')),
        'type': sanitize_input(request.args.get('type', '')),
        'q': sanitize_input(request.args.get('q', ''))
    })


@api_bp.route('/health')
def health_check():
    """Health check with dataset and process metrics"""
    config = current_app.config['app_config']
    dashboard_state = current_app.config['dashboard_state']
    performance_monitor = current_app.config['performance_monitor']

    performance_monitor.update_metrics()
    uptime = time.time() - performance_monitor.start_time
    datasets = dashboard_state.snapshot()

    health_data = {
        'status': 'healthy',
        'timestamp': datetime.now().isoformat(),
        'uptime_seconds': int(uptime),
        'uptime_human': str(timedelta(seconds=int(uptime))),
        'datasets': {name: len(dataset) for name, dataset in datasets.items()},
        'performance': performance_monitor.metrics,
        'config': {
            'csv_base_url': config.CSV_BASE_URL,
            'refresh_interval': config.REFRESH_INTERVAL,
            'auto_refresh': config.ENABLE_AUTO_REFRESH,
            'environment': config.environment
        }
    }

    warnings = []
    empty = [name for name, dataset in datasets.items() if not dataset]
    if empty:
        warnings.append(f"Empty datasets: {', '.join(empty)}")

    if performance_monitor.metrics['memory_usage_mb'] > config.MAX_MEMORY_MB * 1.2:
        warnings.append('High memory usage')

    if warnings:
        health_data['warnings'] = warnings
        health_data['status'] = 'warning'

    return jsonify(health_data), 200


@api_bp.route('/api/datasets')
def list_datasets():
    """Names, sizes and headers of every loaded dataset"""
    dashboard_state = current_app.config['dashboard_state']
    datasets = dashboard_state.snapshot()

    return jsonify({
        'datasets': [
            {'name': name, 'records': len(dataset), 'headers': list(dataset.headers)}
            for name, dataset in datasets.items()
        ],
        'stats': dashboard_state.stats.copy()
    })


@api_bp.route('/api/datasets/<name>')
def get_dataset(name):
    """Records of one dataset, optionally filtered"""
    dataset, error = _get_dataset_or_404(name)
    if error:
        return error

    criteria = _criteria_from_request()
    records = dataset if criteria.is_empty() else filter_records(dataset, criteria)

    return jsonify({
        'name': name,
        'headers': list(dataset.headers),
        'records': records,
        'total': len(dataset),
        'matched': len(records),
        'filters': criteria._asdict()
    })


@api_bp.route('/api/datasets/<name>/filters')
def dataset_filters(name):
    """Distinct values for the table dropdowns"""
    dataset, error = _get_dataset_or_404(name)
    if error:
        return error

    return jsonify({
        'name': name,
        'severity': distinct_values(dataset, 'severity'),
        'attackType': distinct_values(dataset, 'attackType') or distinct_values(dataset, 'type')
    })


@api_bp.route('/api/refresh', methods=['POST'])
def refresh_datasets():
    """Reload every dataset in parallel and swap them in"""
    try:
        loader = current_app.config['dataset_loader']
        result = loader.refresh(current_app.config['dashboard_state'])
        return jsonify({'status': 'ok', **result})

    except Exception as e:
        current_app.logger.error(f"Refresh error: {e}")
        current_app.config['performance_monitor'].increment('load_errors')
        return jsonify({'error': 'Refresh failed'}), 500


@api_bp.route('/api/datasets/<name>/upload', methods=['POST'])
def upload_dataset(name):
    """Replace one dataset with user-supplied CSV text"""
    dashboard_state = current_app.config['dashboard_state']
    performance_monitor = current_app.config['performance_monitor']

    if not dashboard_state.has_dataset(name):
        return jsonify({'error': f'Unknown dataset: {name}'}), 404

    if request.mimetype == 'multipart/form-data':
        upload = request.files.get('file')
        raw = upload.read() if upload else b''
    else:
        raw = request.get_data()

    if not raw:
        performance_monitor.increment('upload_errors')
        return jsonify({'error': 'No CSV content supplied'}), 400

    try:
        text = decode_upload(raw)
    except UnicodeDecodeError as e:
        performance_monitor.increment('upload_errors')
        current_app.logger.warning(f"Upload for {name} rejected: {e}")
        return jsonify({'error': 'Uploaded file could not be read as text'}), 400

    dataset = parse_csv(text)
    dashboard_state.replace_dataset(name, dataset)
    current_app.logger.info(f"Dataset {name} replaced by upload ({len(dataset)} records)")

    return jsonify({
        'status': 'ok',
        'name': name,
        'records': len(dataset),
        'headers': list(dataset.headers)
    })


@api_bp.route('/api/datasets/<name>/export')
def export_dataset(name):
    """Export a dataset, filtered like the table, as CSV"""
    dataset, error = _get_dataset_or_404(name)
    if error:
        return error

    try:
        criteria = _criteria_from_request()
        records = filter_records(dataset, criteria)
        headers = list(dict.fromkeys(dataset.headers)) or (list(records[0]) if records else [])

        output = StringIO()
        writer = csv.writer(output)
        writer.writerow(headers)
        for record in records:
            writer.writerow([record.get(h, '') for h in headers])

        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        stem = os.path.splitext(name)[0]
        response_headers = {
            'Content-Type': 'text/csv',
            'Content-Disposition': f'attachment; filename={stem}_{timestamp}.csv'
        }
        return output.getvalue(), 200, response_headers

    except Exception as e:
        current_app.logger.error(f"Export error: {e}")
        return jsonify({'error': 'Export failed'}), 500


@api_bp.route('/api/stats')
def api_stats():
    """Dashboard summary and process statistics"""
    dashboard_state = current_app.config['dashboard_state']
    performance_monitor = current_app.config['performance_monitor']

    return jsonify({
        'summary': dashboard_state.summary(),
        'performance_metrics': performance_monitor.metrics,
        'load_trend': performance_monitor.get_load_trend(),
        'system_info': {
            'python_version': sys.version.split()[0],
            'platform': sys.platform,
            'process_id': os.getpid()
        }
    })
