"""robyn-safehttp - secure-by-default helpers for Robyn services."""

from robyn import Robyn

from safehttp.api.params import router as params_router
from safehttp.core.logger import LogIcon, logger
from safehttp.core.settings import settings as st

app = Robyn(__file__)

# Routers
app.include_router(params_router)


def main() -> None:
    logger.info("Starting %s | HOST=%s | PORT=%s", st.API_NAME, st.API_HOST, st.API_PORT, icon=LogIcon.START)
    app.start(host=st.API_HOST, port=st.API_PORT)


if __name__ == "__main__":
    main()
