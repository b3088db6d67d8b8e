"""Static HTML pages served to students.

The exam page embeds the browser rendition of the session state machine in
``exam_app.core.services.exam_session``: each handler takes the session object
and returns ``[nextSession, effects]``, and ``dispatch`` runs the effects.
"""

from __future__ import annotations

from html import escape

from exam_app.constants.exam_constants import (
    REASON_MANUAL_SUBMIT,
    REASON_TIME_UP,
    REASON_TOO_MANY_WARNINGS,
    SUBMISSION_FAILED_MESSAGE,
    TICK_INTERVAL_MS,
    WARNING_LIMIT,
)
from exam_app.constants.theme_constants import (
    DEFAULT_HIGHLIGHT_THEME,
    HIGHLIGHT_SCRIPT_URL,
    HIGHLIGHT_STYLESHEET_URL,
    HIGHLIGHT_THEMES,
    THEME_STORAGE_KEY,
)
from exam_app.core.models import Exam

_PAGE_STYLE = """
      :root { font-family: 'Inter', system-ui, sans-serif; background: #0b1120; color: #f5f7ff; }
      body { margin: 0; padding: 1.5rem; display: flex; flex-direction: column; gap: 1rem; }
      a { color: #5eead4; }
      .card { background: #111a30; border-radius: 0.75rem; padding: 1.5rem; box-shadow: 0 0.5rem 1.5rem rgba(0, 0, 0, 0.4); }
      .hidden { display: none; }
      .primary-button { border: none; border-radius: 0.75rem; padding: 0.85rem 1.5rem; font-size: 1rem; background: #1f9aa5; color: #fff; cursor: pointer; }
      .primary-button:disabled { opacity: 0.6; cursor: not-allowed; }
      input[type=text] { padding: 0.6rem; border-radius: 0.5rem; border: 1px solid #334155; margin-right: 0.5rem; }
      .question { margin-bottom: 1.25rem; }
      .question label { display: block; padding: 0.25rem 0; }
      .status-bar { display: flex; gap: 1.5rem; font-size: 1.1rem; }
      #timeLeft { color: #facc15; font-weight: bold; }
      #warnings { color: #f87171; font-weight: bold; }
      #themePopup { position: absolute; right: 1.5rem; top: 3.5rem; display: flex; flex-direction: column; gap: 0.25rem; }
      #themePopup.hidden { display: none; }
"""

_EXAM_PAGE_TEMPLATE = """<!doctype html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <title>Exam</title>
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <link id=\"hljs-theme\" rel=\"stylesheet\" href=\"__DEFAULT_THEME_URL__\" />
    <style>__STYLE__</style>
    <script src=\"__HLJS_URL__\"></script>
  </head>
  <body>
    <div>
      <button id=\"themeBtn\" class=\"primary-button\">Theme</button>
      <div id=\"themePopup\" class=\"card hidden\">__THEME_BUTTONS__</div>
    </div>
    <section class=\"card\" id=\"startCard\">
      <h1 id=\"examTitle\">Loading exam…</h1>
      <p id=\"examInfo\"></p>
      <form id=\"startForm\">
        <input id=\"name\" type=\"text\" placeholder=\"Your name\" required />
        <input id=\"roll\" type=\"text\" placeholder=\"Roll number\" required />
        <button id=\"startBtn\" class=\"primary-button\" type=\"submit\" disabled>Start Exam</button>
      </form>
    </section>
    <section class=\"card hidden\" id=\"examContainer\">
      <div class=\"status-bar\">
        <span>Time left: <span id=\"timeLeft\">0:00</span></span>
        <span>Warnings: <span id=\"warnings\">0</span>/__WARNING_LIMIT__</span>
      </div>
      <div id=\"questions\"></div>
      <button id=\"submitBtn\" class=\"primary-button\">Submit Exam</button>
    </section>
    <script>
      const WARNING_LIMIT = __WARNING_LIMIT__;
      const TICK_INTERVAL_MS = __TICK_INTERVAL_MS__;
      const REASON_TIME_UP = "__REASON_TIME_UP__";
      const REASON_WARNINGS = "__REASON_WARNINGS__";
      const REASON_MANUAL = "__REASON_MANUAL__";
      const FAILED_MESSAGE = "__FAILED_MESSAGE__";
      const THEME_KEY = "__THEME_KEY__";
      const THEME_URL = "__THEME_URL__";
      const THEMES = __THEMES__;
      const examId = Number(location.pathname.split("/")[2]);

      let session = null;
      let ticker = null;

      function formatRemaining(seconds) {
        const s = Math.max(0, seconds);
        const m = Math.floor(s / 60);
        const rest = s % 60;
        return `${m}:${rest < 10 ? "0" : ""}${rest}`;
      }

      function accepts(s) {
        return s.state === "IN_PROGRESS" && !s.submitted;
      }

      function collectAnswers(s) {
        const answers = [];
        for (let i = 0; i < s.questionCount; i++) {
          const el = document.querySelector(`input[name=q${i}]:checked`);
          answers.push(el ? parseInt(el.value, 10) : null);
        }
        return answers;
      }

      function beginSubmission(s, reason) {
        const next = { ...s, state: "SUBMITTING", submitted: true, reason, inFlight: true, answers: collectAnswers(s) };
        return [next, [{ type: "stopTicker" }, { type: "send" }]];
      }

      function startSession(s, name, roll) {
        if (s.state !== "NOT_STARTED") return [s, []];
        const remaining = s.durationMinutes * 60;
        const next = { ...s, state: "IN_PROGRESS", name, roll, remaining };
        return [next, [{ type: "fullscreen" }, { type: "time", display: formatRemaining(remaining) }, { type: "startTicker" }]];
      }

      function tick(s) {
        if (!accepts(s)) return [s, []];
        const next = { ...s, remaining: s.remaining - 1 };
        const effects = [{ type: "time", display: formatRemaining(next.remaining) }];
        if (next.remaining <= 0) {
          const [submitting, more] = beginSubmission(next, REASON_TIME_UP);
          return [submitting, effects.concat(more)];
        }
        return [next, effects];
      }

      function registerWarning(s) {
        if (!accepts(s)) return [s, []];
        const count = s.warnings + 1;
        const next = { ...s, warnings: count };
        const effects = [{ type: "warning", count, blocking: count < WARNING_LIMIT }];
        if (count >= WARNING_LIMIT) {
          const [submitting, more] = beginSubmission(next, REASON_WARNINGS);
          return [submitting, effects.concat(more)];
        }
        return [next, effects];
      }

      function manualSubmit(s) {
        if (s.state === "SUBMITTING" && !s.inFlight) {
          return [{ ...s, inFlight: true }, [{ type: "send" }]];
        }
        if (!accepts(s)) return [s, []];
        return beginSubmission(s, REASON_MANUAL);
      }

      function submissionSucceeded(s, redirect) {
        if (s.state !== "SUBMITTING" || !s.inFlight) return [s, []];
        return [{ ...s, state: "TERMINATED", inFlight: false }, [{ type: "navigate", url: redirect }]];
      }

      function submissionFailed(s) {
        if (s.state !== "SUBMITTING" || !s.inFlight) return [s, []];
        return [{ ...s, inFlight: false }, [{ type: "error", message: FAILED_MESSAGE }]];
      }

      function dispatch(transition) {
        const [next, effects] = transition;
        session = next;
        effects.forEach(runEffect);
      }

      function runEffect(effect) {
        switch (effect.type) {
          case "fullscreen":
            if (document.documentElement.requestFullscreen) {
              document.documentElement.requestFullscreen().catch(() => {});
            }
            break;
          case "startTicker":
            ticker = setInterval(() => dispatch(tick(session)), TICK_INTERVAL_MS);
            break;
          case "stopTicker":
            clearInterval(ticker);
            ticker = null;
            document.getElementById("submitBtn").disabled = true;
            break;
          case "time":
            document.getElementById("timeLeft").textContent = effect.display;
            break;
          case "warning":
            document.getElementById("warnings").textContent = effect.count;
            if (effect.blocking) alert(`Warning ${effect.count}/${WARNING_LIMIT}: Stay in fullscreen`);
            break;
          case "send":
            sendSubmission(session);
            break;
          case "navigate":
            window.location.href = effect.url;
            break;
          case "error": {
            alert(effect.message);
            const btn = document.getElementById("submitBtn");
            btn.textContent = "Retry Submission";
            btn.disabled = false;
            break;
          }
        }
      }

      async function sendSubmission(s) {
        console.info(`Submitting exam ${s.examId} (reason: ${s.reason})`);
        const body = new URLSearchParams({ name: s.name, roll: s.roll, answersJson: JSON.stringify(s.answers) });
        try {
          const r = await fetch(location.pathname + "/submit", {
            method: "POST",
            headers: { "Content-Type": "application/x-www-form-urlencoded", "X-Requested-With": "XMLHttpRequest" },
            body
          });
          const d = await r.json();
          if (d.redirect) {
            dispatch(submissionSucceeded(session, d.redirect));
          } else {
            dispatch(submissionFailed(session));
          }
        } catch (err) {
          dispatch(submissionFailed(session));
        }
      }

      function renderQuestions(questions) {
        const container = document.getElementById("questions");
        container.innerHTML = "";
        questions.forEach((q, i) => {
          const div = document.createElement("div");
          div.className = "question";
          div.innerHTML = `<p><b>Q${i + 1}.</b></p>` + q.html;
          q.choices.forEach((choice, ci) => {
            const label = document.createElement("label");
            const input = document.createElement("input");
            input.type = "radio";
            input.name = `q${i}`;
            input.value = String(ci);
            label.appendChild(input);
            label.appendChild(document.createTextNode(" " + choice));
            div.appendChild(label);
          });
          container.appendChild(div);
        });
        hljs.highlightAll();
      }

      function applyTheme(theme) {
        if (!THEMES.includes(theme)) return;
        document.getElementById("hljs-theme").href = THEME_URL.replace("{theme}", theme);
      }

      async function loadExam() {
        const r = await fetch(`/api/exams/${examId}`);
        if (!r.ok) {
          window.location.href = "/";
          return;
        }
        const data = await r.json();
        document.getElementById("examTitle").textContent = data.exam.title;
        document.getElementById("examInfo").textContent =
          `${data.questions.length} questions, ${data.exam.duration_minutes} minutes`;
        session = {
          examId, durationMinutes: data.exam.duration_minutes, questionCount: data.questions.length,
          state: "NOT_STARTED", remaining: 0, warnings: 0, answers: [], submitted: false,
          reason: null, inFlight: false, name: "", roll: ""
        };
        renderQuestions(data.questions);
        document.getElementById("startBtn").disabled = false;
      }

      applyTheme(localStorage.getItem(THEME_KEY));
      document.getElementById("themeBtn").addEventListener("click", (e) => {
        e.stopPropagation();
        document.getElementById("themePopup").classList.toggle("hidden");
      });
      document.querySelectorAll(".theme-btn").forEach(btn => {
        btn.addEventListener("click", () => {
          applyTheme(btn.dataset.theme);
          localStorage.setItem(THEME_KEY, btn.dataset.theme);
          hljs.highlightAll();
          document.getElementById("themePopup").classList.add("hidden");
        });
      });
      document.body.addEventListener("click", () => document.getElementById("themePopup").classList.add("hidden"));

      document.getElementById("startForm").onsubmit = (e) => {
        e.preventDefault();
        if (!session) return;
        document.getElementById("startCard").style.display = "none";
        document.getElementById("examContainer").classList.remove("hidden");
        dispatch(startSession(session, document.getElementById("name").value, document.getElementById("roll").value));
      };
      document.addEventListener("visibilitychange", () => {
        if (session && document.hidden) dispatch(registerWarning(session));
      });
      document.addEventListener("fullscreenchange", () => {
        if (session && !document.fullscreenElement) dispatch(registerWarning(session));
      });
      document.getElementById("submitBtn").onclick = () => dispatch(manualSubmit(session));

      loadExam();
    </script>
  </body>
</html>
"""


def _theme_buttons() -> str:
    return "".join(
        f'<button class="theme-btn primary-button" data-theme="{theme}">{theme}</button>'
        for theme in HIGHLIGHT_THEMES
    )


def _build_exam_page() -> str:
    replacements = {
        "__STYLE__": _PAGE_STYLE,
        "__DEFAULT_THEME_URL__": HIGHLIGHT_STYLESHEET_URL.format(theme=DEFAULT_HIGHLIGHT_THEME),
        "__HLJS_URL__": HIGHLIGHT_SCRIPT_URL,
        "__THEME_BUTTONS__": _theme_buttons(),
        "__WARNING_LIMIT__": str(WARNING_LIMIT),
        "__TICK_INTERVAL_MS__": str(TICK_INTERVAL_MS),
        "__REASON_TIME_UP__": REASON_TIME_UP,
        "__REASON_WARNINGS__": REASON_TOO_MANY_WARNINGS,
        "__REASON_MANUAL__": REASON_MANUAL_SUBMIT,
        "__FAILED_MESSAGE__": SUBMISSION_FAILED_MESSAGE,
        "__THEME_KEY__": THEME_STORAGE_KEY,
        "__THEME_URL__": HIGHLIGHT_STYLESHEET_URL,
        "__THEMES__": "[" + ", ".join(f'"{theme}"' for theme in HIGHLIGHT_THEMES) + "]",
    }
    page = _EXAM_PAGE_TEMPLATE
    for marker, value in replacements.items():
        page = page.replace(marker, value)
    return page


EXAM_PAGE_HTML = _build_exam_page()


def render_landing_page(exams: list[Exam]) -> str:
    """List the exams students can currently open."""
    items = "".join(
        f'<li><a href="/exams/{exam.id}">{escape(exam.title)}</a> ({exam.duration_minutes} min)</li>'
        for exam in exams
        if exam.is_active
    ) or "<li>No exams are open right now.</li>"
    return f"""<!doctype html>
<html lang=\"en\">
  <head><meta charset=\"utf-8\" /><title>Exams</title><style>{_PAGE_STYLE}</style></head>
  <body>
    <section class=\"card\"><h1>Available exams</h1><ul>{items}</ul></section>
  </body>
</html>"""


THANK_YOU_PAGE_HTML = f"""<!doctype html>
<html lang=\"en\">
  <head><meta charset=\"utf-8\" /><title>Submitted</title><style>{_PAGE_STYLE}</style></head>
  <body>
    <section class=\"card\">
      <h1>Thank you!</h1>
      <p>Your answers have been submitted.</p>
      <p><a href=\"/\">Back to exams</a></p>
    </section>
  </body>
</html>"""
