import json
import logging
import os
import time

from dotenv import load_dotenv
from flask import Flask, request, jsonify
from markupsafe import escape

from generator import DEFAULT_MODEL, ArtifactGenerator
from input_collector import (
    CyclingText,
    InputCollector,
    InvalidFileData,
    SubmissionStatus,
    UploadedFile,
)
from system_prompt import EXAMPLE_PROMPT, REJECTION_NOTICE

load_dotenv()


def load_config():
    return {
        "GEMINI_API_KEY": os.environ.get("GEMINI_API_KEY"),
        "GEMINI_MODEL": os.environ.get("GEMINI_MODEL", DEFAULT_MODEL),
    }


def create_app(generator=None, config=None):
    config = config if config is not None else load_config()

    app = Flask(__name__)
    app.config.update(config)

    if generator is None:
        generator = ArtifactGenerator(
            api_key=app.config.get("GEMINI_API_KEY"),
            model=app.config.get("GEMINI_MODEL", DEFAULT_MODEL),
        )

    def run_generation(prompt, upload):
        if upload is None:
            return generator.generate(prompt)
        return generator.generate(prompt, upload.data, upload.mime_type)

    collector = InputCollector(run_generation, notify=app.logger.info)
    app.extensions["generator"] = generator
    app.extensions["input_collector"] = collector

    @app.route("/")
    def index():
        cycling = CyclingText()
        return HTML_PAGE.replace(
            "/*__CYCLING_TEXT__*/",
            json.dumps(cycling.to_dict()),
        ).replace(
            "/*__EXAMPLE_PROMPT__*/",
            json.dumps(EXAMPLE_PROMPT),
        ).replace(
            "__CYCLING_WORD__",
            str(escape(cycling.current_word)),
        )

    @app.route("/api/health")
    def health():
        return jsonify({
            "status": "ok",
            "model": getattr(generator, "model", None),
            "state": collector.state.value,
        })

    @app.route("/api/generate", methods=["POST"])
    def generate():
        data = request.get_json(silent=True)
        if data is None:
            data = {}
        if not isinstance(data, dict):
            return jsonify({"error": "Invalid request"}), 400
        for key in ("prompt", "file", "file_name"):
            if data.get(key) is not None and not isinstance(data[key], str):
                return jsonify({"error": "Invalid request"}), 400

        prompt = data.get("prompt") or ""
        file_data = data.get("file")

        upload = None
        if file_data:
            try:
                upload = UploadedFile.from_data_url(file_data, name=data.get("file_name"))
            except InvalidFileData:
                return jsonify({"error": "Invalid file data"}), 400

        try:
            start = time.time()
            if upload is not None:
                submission = collector.submit_file(upload, text=prompt)
            else:
                submission = collector.submit_text(prompt)
            elapsed = round(time.time() - start, 1)
        except Exception as e:
            app.logger.error("Generation failed: %s", e)
            return jsonify({"error": str(e)}), 502

        if submission.status is SubmissionStatus.IGNORED:
            return jsonify({"error": "Prompt cannot be empty"}), 400
        if submission.status is SubmissionStatus.REJECTED:
            return jsonify({"error": REJECTION_NOTICE}), 415
        if submission.status is SubmissionStatus.BLOCKED:
            return jsonify({"error": "A generation is already in progress"}), 409

        return jsonify({"html": submission.html, "elapsed": elapsed})

    return app


HTML_PAGE = r"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>Artifact Studio</title>
<style>
  *, *::before, *::after { box-sizing: border-box; margin: 0; padding: 0; }

  body {
    font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
    background: #0f0f0f;
    color: #e0e0e0;
    height: 100vh;
    overflow: hidden;
  }

  .split-layout {
    display: flex;
    height: 100vh;
  }

  .panel {
    flex: 1;
    display: flex;
    flex-direction: column;
    height: 100vh;
    overflow: hidden;
  }
  .panel.input-panel { flex: 0 0 460px; }

  .panel-header {
    padding: 16px 24px;
    border-bottom: 1px solid #1e1e1e;
    display: flex;
    align-items: center;
    gap: 10px;
    flex-shrink: 0;
  }

  .panel-header h2 {
    font-size: 0.95rem;
    font-weight: 600;
    color: #fff;
  }

  .panel-header .badge {
    font-size: 0.65rem;
    padding: 2px 8px;
    border-radius: 4px;
    font-weight: 500;
    text-transform: uppercase;
    letter-spacing: 0.5px;
    background: #1e293b;
    color: #60a5fa;
  }

  .divider {
    width: 1px;
    background: #1e1e1e;
    flex-shrink: 0;
  }

  .panel-body {
    flex: 1;
    overflow-y: auto;
    padding: 20px 24px;
    display: flex;
    flex-direction: column;
    gap: 16px;
  }

  .input-area { position: relative; }

  textarea {
    width: 100%;
    min-height: 110px;
    background: #1a1a1a;
    color: #e0e0e0;
    border: 1px solid #2a2a2a;
    border-radius: 10px;
    padding: 14px;
    padding-bottom: 46px;
    font-size: 0.9rem;
    font-family: inherit;
    resize: vertical;
    outline: none;
    transition: border-color 0.2s;
    line-height: 1.5;
  }
  textarea:focus { border-color: #3b82f6; }
  textarea::placeholder { color: #555; }

  .input-footer {
    position: absolute;
    bottom: 15px;
    right: 13px;
    display: flex;
    gap: 8px;
    align-items: center;
  }

  button {
    background: #3b82f6;
    color: #fff;
    border: none;
    border-radius: 8px;
    padding: 8px 20px;
    font-size: 0.82rem;
    font-weight: 500;
    cursor: pointer;
    transition: background 0.2s, opacity 0.2s;
  }
  button:hover { background: #2563eb; }
  button:disabled { opacity: 0.5; cursor: not-allowed; }

  .chip {
    background: #1a1a1a;
    color: #aaa;
    border: 1px solid #2a2a2a;
    border-radius: 999px;
    font-size: 0.72rem;
    padding: 5px 12px;
    align-self: flex-start;
  }
  .chip:hover { background: #1e293b; color: #60a5fa; }

  .or-divider {
    display: flex;
    align-items: center;
    gap: 12px;
    font-size: 0.7rem;
    font-family: monospace;
    color: #555;
  }
  .or-divider::before, .or-divider::after {
    content: '';
    flex: 1;
    height: 1px;
    background: #2a2a2a;
  }

  .drop-zone {
    display: flex;
    flex-direction: column;
    align-items: center;
    justify-content: center;
    gap: 8px;
    min-height: 220px;
    border: 1px dashed #333;
    border-radius: 12px;
    background: #141414;
    cursor: pointer;
    text-align: center;
    transition: border-color 0.3s, background 0.3s;
  }
  .drop-zone:hover { border-color: #555; }
  .drop-zone.dragging { border-color: #3b82f6; background: #111827; }
  .drop-zone.busy { pointer-events: none; opacity: 0.6; }
  .drop-zone input { display: none; }

  .drop-zone h3 {
    display: flex;
    flex-direction: column;
    gap: 6px;
    font-size: 1.4rem;
    font-weight: 700;
    color: #fff;
  }
  .drop-zone .hint { font-size: 0.78rem; color: #666; }

  .cycling-word {
    display: inline-block;
    min-height: 1.6em;
    border-bottom: 2px solid rgba(59, 130, 246, 0.5);
    transition: opacity 0.5s, transform 0.5s;
  }
  .cycling-word.transitioning { opacity: 0; transform: translateY(6px); }

  .status {
    font-size: 0.78rem;
    color: #888;
    min-height: 1.2em;
  }
  .status .timer { color: #3b82f6; font-variant-numeric: tabular-nums; }

  .error-card {
    display: none;
    background: #1a1111;
    border: 1px solid #ef4444;
    color: #fca5a5;
    border-radius: 10px;
    padding: 14px;
    font-size: 0.85rem;
    white-space: pre-wrap;
  }
  .error-card.visible { display: block; }

  .loading {
    display: flex;
    align-items: center;
    gap: 10px;
    color: #888;
  }
  .spinner {
    width: 16px; height: 16px;
    border: 2px solid #333;
    border-top-color: #3b82f6;
    border-radius: 50%;
    animation: spin 0.8s linear infinite;
  }
  @keyframes spin { to { transform: rotate(360deg); } }

  .preview {
    flex: 1;
    border: none;
    background: #fff;
    width: 100%;
  }
  .preview-empty {
    flex: 1;
    display: flex;
    align-items: center;
    justify-content: center;
    color: #444;
    font-size: 0.9rem;
  }
</style>
</head>
<body>

<div class="split-layout">

  <!-- ── LEFT: Inputs ── -->
  <div class="panel input-panel">
    <div class="panel-header">
      <h2>Artifact Studio</h2>
      <span class="badge">Gemini</span>
    </div>
    <div class="panel-body">
      <div class="input-area">
        <textarea id="prompt" placeholder="Describe what you want to build (or leave empty and just drop a file)..." autofocus></textarea>
        <div class="input-footer">
          <button id="sendBtn" onclick="submitText()" disabled>Send</button>
        </div>
      </div>
      <button id="exampleBtn" class="chip" onclick="useExamplePrompt()">🚀 Try: Python Space Defense</button>

      <div class="or-divider">OR DROP A FILE</div>

      <label id="dropZone" class="drop-zone">
        <h3>
          <span>Bring</span>
          <span id="cyclingWord" class="cycling-word">__CYCLING_WORD__</span>
          <span>to life</span>
        </h3>
        <span class="hint">Drag &amp; Drop or click to upload an image or PDF</span>
        <input id="fileInput" type="file" accept="image/*,application/pdf">
      </label>

      <div id="errorCard" class="error-card"></div>
      <div id="status" class="status"></div>
    </div>
  </div>

  <div class="divider"></div>

  <!-- ── RIGHT: Generated app ── -->
  <div class="panel">
    <div class="panel-header">
      <h2>Generated App</h2>
      <button id="copyBtn" class="chip" onclick="copyHtml()" disabled>Copy HTML</button>
    </div>
    <div id="previewEmpty" class="preview-empty">Your generated app will appear here.</div>
    <iframe id="preview" class="preview" sandbox="allow-scripts allow-modals" style="display:none"></iframe>
  </div>

</div>

<script>
  const CYCLING = /*__CYCLING_TEXT__*/;
  const EXAMPLE_PROMPT = /*__EXAMPLE_PROMPT__*/;

  const promptEl = document.getElementById('prompt');
  const sendBtn = document.getElementById('sendBtn');
  const exampleBtn = document.getElementById('exampleBtn');
  const dropZone = document.getElementById('dropZone');
  const fileInput = document.getElementById('fileInput');
  const errorCard = document.getElementById('errorCard');
  const statusEl = document.getElementById('status');
  const previewEl = document.getElementById('preview');
  const previewEmptyEl = document.getElementById('previewEmpty');
  const copyBtn = document.getElementById('copyBtn');
  const wordEl = document.getElementById('cyclingWord');

  let isGenerating = false;
  let lastHtml = '';

  // ── Cycling headline ──
  let wordIndex = 0;
  setInterval(() => {
    wordEl.classList.add('transitioning');
    setTimeout(() => {
      wordIndex = (wordIndex + 1) % CYCLING.words.length;
      wordEl.textContent = CYCLING.words[wordIndex];
      wordEl.classList.remove('transitioning');
    }, CYCLING.fade_ms);
  }, CYCLING.interval_ms);

  // ── Timer helper ──
  function createTimer(el) {
    let interval = null;
    return {
      start() {
        const t0 = Date.now();
        clearInterval(interval);
        interval = setInterval(() => {
          const s = ((Date.now() - t0) / 1000).toFixed(1);
          el.innerHTML = '<div class="loading"><div class="spinner"></div><span class="timer">' + s + 's</span> bringing it to life...</div>';
        }, 100);
      },
      stop() { clearInterval(interval); interval = null; }
    };
  }
  const timer = createTimer(statusEl);

  function setGenerating(value) {
    isGenerating = value;
    promptEl.disabled = value;
    fileInput.disabled = value;
    exampleBtn.disabled = value;
    dropZone.classList.toggle('busy', value);
    sendBtn.textContent = value ? 'Generating...' : 'Send';
    updateSendButton();
  }

  function updateSendButton() {
    sendBtn.disabled = !promptEl.value.trim() || isGenerating;
  }

  function isAcceptedType(type) {
    return type.startsWith('image/') || type === 'application/pdf';
  }

  // ── API call ──
  async function callApi(body) {
    const res = await fetch('/api/generate', {
      method: 'POST',
      headers: { 'Content-Type': 'application/json' },
      body: JSON.stringify(body),
    });
    const data = await res.json();
    if (!res.ok || data.error) throw new Error(data.error || 'HTTP ' + res.status);
    return data;
  }

  async function generate(body) {
    setGenerating(true);
    errorCard.className = 'error-card';
    timer.start();
    try {
      const data = await callApi(body);
      timer.stop();
      lastHtml = data.html;
      previewEl.srcdoc = data.html;
      previewEl.style.display = 'block';
      previewEmptyEl.style.display = 'none';
      copyBtn.disabled = false;
      statusEl.innerHTML = 'Completed in <span class="timer">' + data.elapsed + 's</span>';
    } catch (e) {
      timer.stop();
      errorCard.className = 'error-card visible';
      errorCard.textContent = e.message;
      statusEl.textContent = '';
    } finally {
      setGenerating(false);
    }
  }

  // ── Text submission ──
  function submitText() {
    const prompt = promptEl.value;
    if (!prompt.trim() || isGenerating) return;
    generate({ prompt });
  }

  function useExamplePrompt() {
    if (isGenerating) return;
    promptEl.value = EXAMPLE_PROMPT;
    updateSendButton();
  }

  promptEl.addEventListener('input', updateSendButton);
  promptEl.addEventListener('keydown', e => {
    if (e.key === 'Enter' && !e.shiftKey) { e.preventDefault(); submitText(); }
  });

  // ── File submission ──
  function handleFile(file) {
    if (isGenerating) return;
    if (!isAcceptedType(file.type)) {
      alert('Please upload an image or PDF.');
      return;
    }
    const reader = new FileReader();
    reader.onload = () => generate({ prompt: promptEl.value, file: reader.result, file_name: file.name });
    reader.onerror = () => alert('Could not read ' + file.name);
    reader.readAsDataURL(file);
  }

  fileInput.addEventListener('change', e => {
    if (e.target.files && e.target.files[0]) handleFile(e.target.files[0]);
    fileInput.value = '';
  });

  dropZone.addEventListener('dragover', e => {
    e.preventDefault();
    if (!isGenerating) dropZone.classList.add('dragging');
  });
  dropZone.addEventListener('dragleave', e => {
    e.preventDefault();
    dropZone.classList.remove('dragging');
  });
  dropZone.addEventListener('drop', e => {
    e.preventDefault();
    if (isGenerating) return;
    dropZone.classList.remove('dragging');
    if (e.dataTransfer.files && e.dataTransfer.files[0]) handleFile(e.dataTransfer.files[0]);
  });

  function copyHtml() {
    if (!lastHtml) return;
    navigator.clipboard.writeText(lastHtml);
    copyBtn.textContent = 'Copied!';
    setTimeout(() => copyBtn.textContent = 'Copy HTML', 1500);
  }
</script>
</body>
</html>
"""

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    create_app().run(debug=True, port=5001, threaded=True)
