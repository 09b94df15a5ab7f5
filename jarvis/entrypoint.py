# jarvis/entrypoint.py
import uvicorn

from jarvis.config import config
from jarvis.internal.dropship.rules import get_ruleset


def main():
    # Fail at startup on a misconfigured rule set instead of inside a background task
    ruleset = get_ruleset()
    print(f'🚀 Webhook server listening on port {config.port}, rule set {ruleset.version}')
    uvicorn.run('jarvis.main:app', host='0.0.0.0', port=config.port)


if __name__ == '__main__':
    main()
