# siteapi/wsgi.py
# gunicorn "siteapi.wsgi:app"  /  flask --app siteapi.wsgi run
from siteapi.main import create_app

app = create_app()

if __name__ == "__main__":
    # OBS: em produção use gunicorn; este bloco é só para execução direta.
    app.run(host="0.0.0.0", port=5000)
