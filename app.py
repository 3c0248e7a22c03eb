import logging
import sys

from flask import Flask, render_template, request
from flask_sock import Sock

import config
from inventory import Inventory, ScanRequest, ScanResult, load_index
from sheets import ConfigurationError, GoogleSheetsClient, SheetsError, get_creds

logger = logging.getLogger(__name__)

app = Flask(__name__)
sock = Sock(app)

SHEET_UNAVAILABLE = 'unable to reach the inventory sheet: please try again'


def get_inventory():
    try:
        return app.config['INVENTORY']
    except KeyError:
        raise RuntimeError(
            "Inventory not configured: start the server with `python app.py` "
            "or the arc-inventory command") from None


def render_form(result):
    return render_template('index.html', result=result, teams=config.TEAMS)


@app.route('/')
@app.route('/scan', methods=['GET', 'POST'])
def index():
    if request.method == 'POST':
        scan = ScanRequest(
            barcode=request.form.get('barcode', ''),
            user=request.form.get('user', ''),
            team=request.form.get('team', ''),
            status=request.form.get('status', ''),
        )
        return render_form(get_inventory().process(scan))

    return render_form(ScanResult.cleared())


@app.errorhandler(SheetsError)
def sheet_unavailable(exc):
    logger.error("Sheet request failed: %s", exc)
    return render_form(ScanResult(error=SHEET_UNAVAILABLE)), 502


def greet_and_echo(ws):
    """Sends a greeting, then echoes every message back until the client leaves."""
    ws.send('Hi Client!')
    while True:
        message = ws.receive()
        logger.info("ws message: %s", message)
        ws.send(message)


@sock.route('/ws')
def ws_endpoint(ws):
    logger.info("Client Connected")
    greet_and_echo(ws)


def main():
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )
    try:
        creds = get_creds(config.CLIENT_SECRET_FILE, config.TOKEN_FILE, config.SCOPES_EDIT)
    except ConfigurationError as exc:
        logger.critical("%s", exc)
        sys.exit(1)

    client = GoogleSheetsClient(creds)
    # Built before the server starts and never changed afterwards
    index = load_index(client, config.SPREADSHEET_ID, config.BARCODE_RANGE)
    app.config['INVENTORY'] = Inventory(
        client, config.SPREADSHEET_ID, index,
        report_write_errors=config.REPORT_WRITE_ERRORS,
    )
    app.run(host=config.HOST, port=config.PORT)


if __name__ == '__main__':
    main()
