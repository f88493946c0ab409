from __future__ import annotations

import json
from typing import Sequence

from healthboard.config import DASHBOARD_REFRESH_MINUTES
from healthboard.models import Endpoint

HTML = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>API Health Monitor</title>
<style>
body{font-family:system-ui,sans-serif;max-width:800px;margin:0 auto;padding:20px}
h1{color:#333}
.controls{margin-bottom:20px;display:flex;align-items:center}
.card{border:1px solid #ddd;border-radius:8px;padding:16px;margin-bottom:16px}
.healthy{border-left:5px solid #4caf50}
.unhealthy{border-left:5px solid #f44336}
.status{font-size:1.2em;font-weight:bold}
.latency{color:#666}
pre{background:#f5f5f5;padding:10px;border-radius:4px;overflow:auto}
button{padding:8px 16px;background:#4285f4;color:#fff;border:none;border-radius:4px;cursor:pointer;margin-right:10px}
button:hover{background:#3367d6}
label{margin-right:10px}
input[type="number"]{width:60px;padding:5px}
.next-refresh{margin-left:10px;font-style:italic;color:#666}
</style>
</head>
<body>
<h1>API Health Monitor</h1>
<div class="controls">
  <button id="refresh">Refresh now</button>
  <label for="auto-refresh"><input type="checkbox" id="auto-refresh" checked> Auto refresh</label>
  <label for="refresh-interval">Every <input type="number" id="refresh-interval" min="1" value="__REFRESH_MINUTES__"> min</label>
  <span id="next-refresh" class="next-refresh"></span>
</div>
<div id="results"></div>
<script>
const endpoints = __ENDPOINTS__;
let autoRefreshEnabled = true;
let refreshInterval = __REFRESH_MINUTES__;
let refreshTimeoutId = null;
let countdownId = null;
let nextRefreshTime = null;

function escapeHtml(value) {
  return String(value).replace(/[&<>"']/g, function (c) {
    return {"&": "&amp;", "<": "&lt;", ">": "&gt;", '"': "&quot;", "'": "&#39;"}[c];
  });
}

function renderPlaceholders() {
  const results = document.getElementById('results');
  results.innerHTML = endpoints.map(function (ep) {
    return '<div class="card"><h2>' + escapeHtml(ep.name) + '</h2><p>' + escapeHtml(ep.url) + '</p><p>Loading...</p></div>';
  }).join('');
}

function updateNextRefreshDisplay() {
  const el = document.getElementById('next-refresh');
  if (!autoRefreshEnabled || !nextRefreshTime) {
    el.textContent = '';
    return;
  }
  const timeLeft = Math.round((nextRefreshTime - new Date()) / 1000);
  if (timeLeft > 0) {
    el.textContent = '(next refresh in ' + Math.floor(timeLeft / 60) + 'm ' + (timeLeft % 60) + 's)';
  }
}

function stopRefreshTimer() {
  if (refreshTimeoutId) clearTimeout(refreshTimeoutId);
  if (countdownId) clearInterval(countdownId);
  refreshTimeoutId = null;
  countdownId = null;
  nextRefreshTime = null;
  updateNextRefreshDisplay();
}

function startRefreshTimer() {
  stopRefreshTimer();
  if (!autoRefreshEnabled) return;
  const intervalMs = refreshInterval * 60 * 1000;
  nextRefreshTime = new Date(Date.now() + intervalMs);
  refreshTimeoutId = setTimeout(function () {
    checkHealth();
    startRefreshTimer();
  }, intervalMs);
  updateNextRefreshDisplay();
  countdownId = setInterval(updateNextRefreshDisplay, 1000);
}

function renderRecord(item) {
  let content = '<h2>' + escapeHtml(item.name) + '</h2>'
    + '<p class="status">Status: ' + (item.healthy ? '&#9989; Healthy' : '&#10060; Unhealthy') + '</p>'
    + '<p>URL: <a href="' + escapeHtml(item.url) + '" target="_blank">' + escapeHtml(item.url) + '</a></p>'
    + '<p>HTTP status: ' + escapeHtml(item.status) + '</p>';
  if (item.latency) {
    content += '<p class="latency">Latency: ' + escapeHtml(item.latency) + '</p>';
  }
  if (item.error) {
    content += '<p>Error: ' + escapeHtml(item.error) + '</p>';
  } else if (item.response !== undefined && item.response !== null && item.response !== '') {
    content += '<pre>' + escapeHtml(JSON.stringify(item.response, null, 2)) + '</pre>';
  }
  content += '<p>Checked at: ' + escapeHtml(new Date(item.timestamp).toLocaleString()) + '</p>';
  const card = document.createElement('div');
  card.className = 'card ' + (item.healthy ? 'healthy' : 'unhealthy');
  card.innerHTML = content;
  return card;
}

async function checkHealth() {
  const results = document.getElementById('results');
  renderPlaceholders();
  try {
    const response = await fetch('/check', {cache: 'no-store'});
    const data = await response.json();
    results.innerHTML = '';
    data.forEach(function (item) { results.appendChild(renderRecord(item)); });
  } catch (error) {
    results.innerHTML = '<p>Failed to load health status: ' + escapeHtml(error.message) + '</p>';
  }
}

document.getElementById('refresh').addEventListener('click', function () { checkHealth(); });

document.getElementById('auto-refresh').addEventListener('change', function (e) {
  autoRefreshEnabled = e.target.checked;
  if (autoRefreshEnabled) {
    startRefreshTimer();
  } else {
    stopRefreshTimer();
  }
});

document.getElementById('refresh-interval').addEventListener('change', function (e) {
  const value = parseInt(e.target.value, 10);
  if (value > 0) {
    refreshInterval = value;
    if (autoRefreshEnabled) startRefreshTimer();
  }
});

checkHealth();
startRefreshTimer();
</script>
</body>
</html>
"""


def _script_json(value) -> str:
    # Keep "</script>" inside data from closing the script element.
    return json.dumps(value, ensure_ascii=False).replace("</", "<\\/")


def render_dashboard(
    endpoints: Sequence[Endpoint],
    refresh_minutes: int = DASHBOARD_REFRESH_MINUTES,
) -> str:
    embedded = [{"name": ep.name, "url": ep.url} for ep in endpoints]
    return (
        HTML.replace("__ENDPOINTS__", _script_json(embedded))
        .replace("__REFRESH_MINUTES__", str(int(refresh_minutes)))
    )
