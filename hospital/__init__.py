"""
Backend gestione ospedale: pazienti, medici, appuntamenti, consultazioni.

Struttura:
- config.py       : configurazione da variabili d'ambiente / .env
- db.py           : engine e sessioni SQLAlchemy
- models.py       : modelli ORM
- status.py       : stati appuntamento e tabella delle transizioni
- identity.py     : generazione id appuntamenti (UUID)
- repositories.py : accesso ai dati per entità
- services.py     : logica di dominio (integrità referenziale, facciata CRUD)
- schemas.py      : rappresentazione esterna (pydantic)
- api_main.py     : API HTTP (FastAPI)
- seed.py         : dati di esempio
- cli.py          : CLI
"""
