"""Mobile-friendly control page served on ``/``."""

from jogserver import __version__

CONTROL_PAGE = f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <title>jogserver {__version__}</title>
    <style>
        body {{
            font-family: Arial, sans-serif;
            margin: 0;
            padding: 0;
            height: 100vh;
            display: flex;
            flex-direction: column;
            justify-content: space-between;
            background-color: #f0f0f0;
        }}
        h1 {{
            margin: 0;
            padding: 10px;
            font-size: 48px;
            background-color: #007BFF;
            color: white;
            text-align: center;
        }}
        .container {{
            flex: 1;
            display: flex;
            justify-content: space-between;
            align-items: stretch;
            padding: 10px;
        }}
        .column {{
            display: flex;
            flex-direction: column;
            justify-content: space-between;
            align-items: center;
            width: 48%;
        }}
        button {{
            font-size: 44px;
            padding: 15px;
            margin: 5px 0;
            width: 100%;
            height: 30%;
            border: none;
            border-radius: 12px;
            cursor: pointer;
            background-color: #007BFF;
            color: white;
        }}
        button:active {{
            background-color: #0056b3;
        }}
        .exit-button {{
            font-size: 40px;
            height: 10%;
            border-radius: 0;
            margin: 0;
            background-color: #FF4136;
        }}
        .exit-button:active {{
            background-color: #cc3227;
        }}
    </style>
    <script>
        function sendCommand(command) {{
            fetch('/send?command=' + encodeURIComponent(command))
                .then(response => response.text())
                .then(data => console.log(data))
                .catch(error => console.error(error));
        }}
    </script>
</head>
<body>
    <h1>Nozzle Control {__version__}</h1>
    <div class="container">
        <div class="column">
            <button onclick="sendCommand('raise 1.0')">Raise 1mm</button>
            <button onclick="sendCommand('raise 0.1')">Raise 0.1mm</button>
            <button onclick="sendCommand('raise 0.01')">Raise 0.01mm</button>
        </div>
        <div class="column">
            <button onclick="sendCommand('lower 1.0')">Lower 1mm</button>
            <button onclick="sendCommand('lower 0.1')">Lower 0.1mm</button>
            <button onclick="sendCommand('lower 0.01')">Lower 0.01mm</button>
        </div>
    </div>
    <button class="exit-button" onclick="sendCommand('exit')">EXIT</button>
</body>
</html>
"""
