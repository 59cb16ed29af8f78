CSS_LOG = """
/* Base styles */
body {
    font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, sans-serif;
    background: #1e1e1e;
    color: #e0e0e0;
    margin: 2em;
}

.section {
    margin: 1.5em 0;
    padding: 1em;
    background: #2d2d2d;
    border-radius: 4px;
}

.info { margin: 0.3em 0; }
.warning { margin: 0.3em 0; color: #e5c07b; }

.result {
    margin: 0.5em 0;
    padding: 0.4em 0.8em;
    background: #263238;
    border-left: 3px solid #4caf50;
}

.table-container table {
    border-collapse: collapse;
}

.table-container th,
.table-container td {
    border: 1px solid #444;
    padding: 6px 12px;
    text-align: left;
}

.color-swatch {
    display: inline-block;
    width: 0.9em;
    height: 0.9em;
    margin-right: 0.4em;
    border: 1px solid #555;
    vertical-align: middle;
}
"""
