from flask import Blueprint, abort, current_app, render_template_string, request, send_from_directory

from ..models.dataset import Dataset
from ..models.record_filter import (
    ALL_SEVERITY, ALL_TYPES, ATTACK_TYPES, SEVERITY_LEVELS, FilterCriteria, filter_records
)
from ..utils.validation import sanitize_input, validate_dataset_name

views_bp = Blueprint('views', __name__)

DASHBOARD_TEMPLATE = """<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>DDoS Attack Analysis</title>
  <style>
    body { background: #111827; color: #f9fafb; font-family: sans-serif; margin: 0; padding: 24px; }
    .cards { display: flex; gap: 16px; margin-bottom: 24px; }
    .card { flex: 1; border-radius: 8px; padding: 16px; background: #1f2937; }
    .card b { display: block; font-size: 2em; }
    table { width: 100%; border-collapse: collapse; }
    th, td { padding: 6px 8px; border-bottom: 1px solid #374151; text-align: left; }
    .feed li { margin-bottom: 8px; }
  </style>
</head>
<body>
  <h1>DDoS Attack Analysis</h1>
  <p>Honeypot monitoring &amp; threat intelligence &middot; last updated {{ summary.stats.last_updated or 'never' }}</p>

  <div class="cards">
    <div class="card">Total Attacks<b>{{ summary.total_attacks }}</b></div>
    <div class="card">Blocked Attacks<b>{{ summary.blocked }}</b></div>
    <div class="card">Active Threats<b>{{ summary.active }}</b></div>
    <div class="card">Critical Level<b>{{ summary.critical }}</b></div>
  </div>

  <h2>Live Attack Feed</h2>
  <ul class="feed">
  {% for attack in feed %}
    <li><strong>{{ attack.type }}</strong> [{{ attack.severity }}] from {{ attack.source }} ({{ attack.country }}),
        {{ attack.protocol }}, {{ attack.packets }} packets at {{ attack.timestamp }}: {{ attack.status }}</li>
  {% else %}
    <li>No live feed data</li>
  {% endfor %}
  </ul>

  <h2>Historical Attack Data</h2>
  <form method="get">
    <select name="severity">
      <option>{{ all_severity }}</option>
      {% for level in severity_levels %}
      <option {% if level == criteria.severity %}selected{% endif %}>{{ level }}</option>
      {% endfor %}
    </select>
    <select name="type">
      <option>{{ all_types }}</option>
      {% for attack_type in attack_types %}
      <option {% if attack_type == criteria.attack_type %}selected{% endif %}>{{ attack_type }}</option>
      {% endfor %}
    </select>
    <button type="submit">Filter</button>
  </form>
  <table>
    <thead><tr>
      <th>Timestamp</th><th>Source IP</th><th>Country</th><th>Attack Type</th>
      <th>Protocol</th><th>Severity</th><th>Packets</th><th>Status</th>
    </tr></thead>
    <tbody>
    {% for row in table %}
      <tr>
        <td>{{ row.timestamp }}</td><td>{{ row.sourceIP }}</td><td>{{ row.country }}</td>
        <td>{{ row.attackType }}</td><td>{{ row.protocol }}</td><td>{{ row.severity }}</td>
        <td>{{ row.packets }}</td><td>{{ row.status }}</td>
      </tr>
    {% endfor %}
    </tbody>
  </table>
</body>
</html>
"""


@views_bp.route('/')
def dashboard():
    """Main dashboard"""
    dashboard_state = current_app.config['dashboard_state']
    datasets = dashboard_state.snapshot()

    criteria = FilterCriteria.from_args({
        'severity': sanitize_input(request.args.get('severity', '')),
        'type': sanitize_input(request.args.get('type', ''))
    })
    table = filter_records(datasets.get('historical_data.csv') or Dataset.empty(), criteria)

    return render_template_string(
        DASHBOARD_TEMPLATE,
        summary=dashboard_state.summary(),
        feed=datasets.get('live_attack_feed.csv') or [],
        table=table,
        criteria=criteria,
        severity_levels=SEVERITY_LEVELS,
        attack_types=ATTACK_TYPES,
        all_severity=ALL_SEVERITY,
        all_types=ALL_TYPES
    )


@views_bp.route('/<filename>')
def serve_fixture(filename):
    """Static CSV fixtures, the serving root the fetcher reads from"""
    if not validate_dataset_name(filename):
        abort(404)
    return send_from_directory(
        current_app.config['app_config'].DATA_DIR, filename, mimetype='text/csv'
    )
