"""Streamlit frontend for the Audio Assistant."""
import html
import os
from typing import Optional

import requests
import streamlit as st

# Page configuration
st.set_page_config(
    page_title="Audio Assistant",
    page_icon="🎙️",
    layout="wide",
    initial_sidebar_state="collapsed",
)

# API Configuration
BACKEND_URL = os.getenv("BACKEND_URL", "http://localhost:8082")
API_BASE_URL = f"{BACKEND_URL}/api/v1"
HEALTH_URL = f"{BACKEND_URL}/health"

AUDIO_TYPES = ["flac", "m4a", "mp3", "mp4", "mpeg", "mpga", "oga", "ogg", "wav", "webm"]
DOCUMENT_TYPES = ["pdf", "txt"]

st.markdown("""
    <style>
        #MainMenu {visibility: hidden;}
        footer {visibility: hidden;}

        .main-header {
            text-align: center;
            padding: 1.5rem 0;
            border-bottom: 2px solid #e0e0e0;
            margin-bottom: 1.5rem;
        }

        .transcript-box {
            background: #f3f4f6;
            padding: 1rem;
            border-radius: 6px;
            margin: 0.5rem 0;
        }

        .answer-box {
            background: #f0f9ff;
            padding: 1rem;
            border-radius: 6px;
            border-left: 4px solid #3b82f6;
            margin: 0.5rem 0;
        }
    </style>
""", unsafe_allow_html=True)

# Initialize session state
if "document" not in st.session_state:
    st.session_state.document = None
if "answers" not in st.session_state:
    st.session_state.answers = []


def check_backend_health() -> Optional[dict]:
    """Return the backend health payload, or None if it is unreachable."""
    try:
        response = requests.get(HEALTH_URL, timeout=2)
    except requests.exceptions.RequestException:
        return None
    if response.status_code != 200:
        return None
    return response.json()


def error_message(response: requests.Response) -> str:
    try:
        return response.json().get("error", "Unknown error")
    except ValueError:
        return f"HTTP {response.status_code}"


def post(path: str, **kwargs) -> Optional[dict]:
    """POST to the backend and surface ``{"error"}`` bodies in the UI."""
    try:
        response = requests.post(f"{API_BASE_URL}{path}", **kwargs)
    except requests.exceptions.RequestException as e:
        st.error(f"Connection error: {str(e)}")
        return None

    if response.status_code == 200:
        return response.json()
    st.error(f"Error: {error_message(response)}")
    return None


def process_audio(name: str, data: bytes, mime_type: str) -> Optional[dict]:
    """Send a recording to be transcribed and answered."""
    files = {"audio": (name, data, mime_type or "application/octet-stream")}
    return post("/proccess-audio", files=files, timeout=300)


def upload_document(file) -> Optional[dict]:
    """Upload a PDF or TXT document, replacing the current one."""
    files = {"document": (file.name, file.getvalue(), file.type or "application/octet-stream")}
    return post("/document", files=files, timeout=300)


def ask_question(question: str) -> Optional[dict]:
    return post("/ask", json={"question": question}, timeout=120)


def record_answer(result: Optional[dict], source: str) -> None:
    if result:
        st.session_state.answers.append({
            "question": result.get("question", ""),
            "answer": result.get("answer", ""),
            "source": source,
        })
        st.rerun()


# Main UI
st.markdown("""
    <div class="main-header">
        <h1>🎙️ Audio Assistant</h1>
        <p>Upload a document, then ask about it by voice or text</p>
    </div>
""", unsafe_allow_html=True)

health = check_backend_health()
if health is None:
    st.error(f"⚠️ Backend server is not running. Please start the backend server at {BACKEND_URL}")
    st.stop()

with st.sidebar:
    st.header("Status")
    st.info("Backend: Connected ✅")
    if health.get("documents_loaded"):
        st.success("Document loaded")
    else:
        st.warning("No document loaded")

    st.markdown("---")
    if st.button("Clear History"):
        st.session_state.answers = []
        st.rerun()

col1, col2 = st.columns([1, 1])

with col1:
    st.header("📤 Document")

    uploaded_file = st.file_uploader(
        "Drag and drop a document",
        type=DOCUMENT_TYPES,
        help="Uploading a new document replaces the previous one",
    )

    if uploaded_file is not None and st.button("Upload & Process", type="primary"):
        with st.spinner("Processing document..."):
            result = upload_document(uploaded_file)
            if result:
                st.success(result.get("message", "Document uploaded"))
                st.json({
                    "Filename": result.get("filename"),
                    "Total Chunks": result.get("total_chunks"),
                    "Total Pages": result.get("total_pages"),
                })
                st.session_state.document = result

with col2:
    st.header("❓ Ask")

    mode = st.radio(
        "Select Mode",
        ["Record Audio", "Upload Audio", "Type Question"],
        horizontal=True,
    )

    if mode == "Record Audio":
        recording = st.audio_input("Record your question")
        if recording is not None and st.button("Send Recording", type="primary"):
            with st.spinner("Transcribing and answering..."):
                record_answer(
                    process_audio("recording.wav", recording.getvalue(), "audio/wav"),
                    "voice",
                )

    elif mode == "Upload Audio":
        audio_file = st.file_uploader("Choose an audio file", type=AUDIO_TYPES)
        if audio_file is not None:
            st.audio(audio_file)
            if st.button("Upload Audio", type="primary"):
                with st.spinner("Transcribing and answering..."):
                    record_answer(
                        process_audio(audio_file.name, audio_file.getvalue(), audio_file.type),
                        "voice",
                    )

    else:
        question = st.text_area(
            "Enter your question",
            height=100,
            placeholder="What would you like to know about the uploaded document?",
        )
        if st.button("Get Answer", type="primary", disabled=not question.strip()):
            with st.spinner("Generating answer..."):
                record_answer(ask_question(question.strip()), "text")

if st.session_state.answers:
    st.divider()
    st.header("💬 Answers")

    for idx, answer_data in enumerate(reversed(st.session_state.answers)):
        icon = "🎙️" if answer_data["source"] == "voice" else "⌨️"
        with st.expander(f"{icon} {answer_data['question']}", expanded=(idx == 0)):
            st.markdown(
                f"<div class='transcript-box'><b>You said:</b> {html.escape(answer_data['question'])}</div>",
                unsafe_allow_html=True,
            )
            st.markdown(
                f"<div class='answer-box'><b>Assistant response:</b> {html.escape(answer_data['answer'])}</div>",
                unsafe_allow_html=True,
            )
