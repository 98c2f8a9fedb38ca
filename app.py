import streamlit as st
from moodlog.config import APP_TITLE
from moodlog.logging_setup import setup_logging
from moodlog.ui import render_app
from moodlog.services.storage import init_db

st.set_page_config(page_title=APP_TITLE, page_icon="📓", layout="wide")

def main():
    setup_logging()
    init_db()
    render_app()

if __name__ == "__main__":
    main()
