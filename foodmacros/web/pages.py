"""
HTML shells for the chat page and the embeddable widget.

Both pages only hold view state (messages, loading flags) in the browser;
card markup always comes from /api/cards.
"""
from __future__ import annotations

import json

CARD_CSS = r"""
  :root { --border:#e5e7eb; --muted:#6b7280; --text:#111827; --red:#991b1b; }
  * { box-sizing: border-box; }
  body { margin:0; font-family: ui-sans-serif, system-ui, -apple-system, "Segoe UI", Roboto, sans-serif; background:#fff; color:var(--text); }
  .meal-card { display:flex; flex-direction:column; padding:16px 0; }
  .meal-card.web { max-width: 42rem; margin: 0 auto; width:100%; border-bottom:1px solid var(--border); }
  .meal-card.web.last { border-bottom:0; }
  .meal-header { display:flex; justify-content:space-between; align-items:center; gap:12px; padding: 0 16px 16px; }
  .meal-title { display:flex; align-items:center; gap:12px; }
  .meal-icon { width:56px; height:56px; border-radius:12px; background:#f3f4f6; color:#9ca3af; display:flex; align-items:center; justify-content:center; }
  .meal-icon svg { width:32px; height:32px; }
  .meal-name { margin:0; font-size:20px; font-weight:400; }
  .meal-size { margin:2px 0 0; color:var(--muted); font-size:16px; }
  .toggle { width:48px; height:48px; border:none; border-radius:999px; background:#f3f4f6; display:flex; align-items:center; justify-content:center; cursor:pointer; }
  .toggle:hover { background:#e5e7eb; }
  .toggle .chevron { width:24px; height:24px; color:#4b5563; transition: transform .15s; }
  .toggle[aria-expanded="true"] .chevron { transform: rotate(180deg); }
  .divider { border-top:1px solid var(--border); }
  .meal-body { padding: 16px 24px 0; }
  .nutrients { display:flex; justify-content:space-between; padding: 0 24px; }
  .cell { display:flex; flex-direction:column; align-items:center; gap:4px; min-width:64px; }
  .cell p { margin:0; }
  .label { color:var(--muted); font-size:14px; }
  .value { font-size:20px; }
  .breakdown { margin-top:12px; border-top:1px solid #d1d5db; }
  .ingredient { padding:8px 0; border-radius:4px; }
  .ingredient.even { background:#f3f4f6; }
  .ingredient.odd { background:#f9fafb; }
  .ingredient-name { display:block; color:var(--muted); font-size:13px; padding: 0 16px 6px; }
  .meal-card.widget .meal-header { padding: 0 12px 16px; }
  .meal-card.widget .meal-body { padding: 16px 12px 0; }
  .meal-card.widget .nutrients { padding: 0; }
  .error-panel { background:#fef2f2; border:1px solid #fecaca; border-radius:8px; padding:16px; }
  .error-panel p { margin:0; color:var(--red); }
  .loading { display:flex; flex-direction:column; align-items:center; justify-content:center; padding:48px 0; }
  .spinner { width:48px; height:48px; border-radius:999px; border:4px solid #d1d5db; border-top-color:#000; animation: spin 1s linear infinite; margin-bottom:16px; }
  .loading-title { margin:0; color:#4b5563; font-weight:500; }
  .loading-sub { margin:8px 0 0; color:var(--muted); font-size:14px; }
  .empty p { color:var(--muted); text-align:center; }
  @keyframes spin { to { transform: rotate(360deg); } }
"""

# Per-card toggle: state lives on the clicked card only.
TOGGLE_JS = r"""
  function wireCards(root){
    root.querySelectorAll('[data-toggle-breakdown]').forEach((btn) => {
      btn.onclick = () => {
        const card = btn.closest('.meal-card');
        const panel = card.querySelector('.breakdown');
        const open = btn.getAttribute('aria-expanded') === 'true';
        btn.setAttribute('aria-expanded', String(!open));
        btn.setAttribute('aria-label', open ? 'Show breakdown' : 'Hide breakdown');
        panel.hidden = open;
      };
    });
  }

  async function renderCards(payload, variant){
    const r = await fetch(API_BASE + '/api/cards?variant=' + variant, {
      method: 'POST',
      headers: {'Content-Type': 'application/json'},
      body: JSON.stringify(payload === undefined ? null : payload),
    });
    if(!r.ok) throw new Error('Failed to render meal cards');
    return await r.json();
  }
"""

WEB_HTML = r"""<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <title>Food Nutrition Analyzer</title>
  <style>
__CARD_CSS__
  .page { display:flex; flex-direction:column; height:100vh; }
  .header { border-bottom:1px solid var(--border); padding:12px 16px; }
  .header h1 { margin:0; font-size:18px; font-weight:600; }
  .messages { flex:1; overflow-y:auto; padding:24px 16px; }
  .intro { display:flex; flex-direction:column; align-items:center; justify-content:center; height:100%; text-align:center; }
  .intro h2 { font-size:20px; font-weight:600; margin: 0 0 8px; }
  .intro p { color:var(--muted); max-width:28rem; margin:0; }
  .stack > * + * { margin-top:24px; }
  .user-row { display:flex; justify-content:flex-end; }
  .bubble { max-width:85%; border-radius:16px; background:#f3f4f6; padding:12px 16px; white-space:pre-wrap; margin:0; }
  .assistant-note { background:#f9fafb; border-radius:16px; padding:12px 16px; color:#374151; }
  .typing { display:flex; align-items:center; gap:8px; color:var(--muted); }
  .dot { width:8px; height:8px; border-radius:999px; background:#9ca3af; animation: bounce 1s infinite; }
  .dot:nth-child(2) { animation-delay:.2s; } .dot:nth-child(3) { animation-delay:.4s; }
  @keyframes bounce { 0%,100% { transform: translateY(0); } 50% { transform: translateY(-4px); } }
  .composer { border-top:1px solid var(--border); padding:16px; }
  .composer form { display:flex; gap:8px; align-items:flex-end; }
  .composer textarea { flex:1; padding:12px 16px; border:1px solid #d1d5db; border-radius:16px; resize:none; max-height:200px; font: inherit; }
  .composer button { padding:12px 16px; background:#111827; color:#fff; border:none; border-radius:16px; cursor:pointer; }
  .composer button:disabled { opacity:.5; cursor:not-allowed; }
  </style>
</head>
<body>
  <div class="page">
    <div class="header"><h1>Food Nutrition Analyzer</h1></div>
    <div id="messages" class="messages">
      <div id="intro" class="intro">
        <h2>Analyze Your Food Nutrition</h2>
        <p>Enter a food description to get detailed nutritional information.
           For example: "Big Mac Meal" or "pizza and burger"</p>
      </div>
      <div id="stack" class="stack"></div>
      <div id="end"></div>
    </div>
    <div class="composer">
      <form id="form">
        <textarea id="input" rows="1" placeholder="Describe the food you want to analyze..."></textarea>
        <button id="send" type="submit" disabled>&#10148;</button>
      </form>
    </div>
  </div>

<script>
  const API_BASE = __API_BASE__;
  const GENERIC_ERROR = 'Failed to analyze food. Please try again.';
__TOGGLE_JS__

  const stack = document.getElementById('stack');
  const input = document.getElementById('input');
  const send = document.getElementById('send');
  let isLoading = false;

  function scrollToBottom(){ document.getElementById('end').scrollIntoView({behavior: 'smooth'}); }

  function setLoading(on){
    isLoading = on;
    input.disabled = on;
    send.disabled = on || !input.value.trim();
    const existing = document.getElementById('typing');
    if(on && !existing){
      const t = document.createElement('div');
      t.id = 'typing'; t.className = 'typing';
      t.innerHTML = '<div class="dot"></div><div class="dot"></div><div class="dot"></div><span>Analyzing food nutrition...</span>';
      stack.appendChild(t);
    } else if(!on && existing){
      existing.remove();
    }
  }

  function addUserMessage(text){
    document.getElementById('intro').style.display = 'none';
    const row = document.createElement('div');
    row.className = 'user-row';
    const p = document.createElement('p');
    p.className = 'bubble';
    p.textContent = text;
    row.appendChild(p);
    stack.appendChild(row);
  }

  function addAssistantHtml(html){
    const box = document.createElement('div');
    box.innerHTML = html;
    wireCards(box);
    const typing = document.getElementById('typing');
    stack.insertBefore(box, typing);
  }

  function addAssistantError(message){
    const box = document.createElement('div');
    box.className = 'error-panel';
    const p = document.createElement('p');
    p.textContent = message;
    box.appendChild(p);
    stack.insertBefore(box, document.getElementById('typing'));
  }

  async function submit(){
    const text = input.value.trim();
    if(!text || isLoading) return;
    addUserMessage(text);
    input.value = '';
    input.style.height = 'auto';
    setLoading(true);
    scrollToBottom();
    try{
      const r = await fetch(API_BASE + '/api/analyze-food', {
        method: 'POST',
        headers: {'Content-Type': 'application/json'},
        body: JSON.stringify({foodDescription: text}),
      });
      const data = await r.json();
      if(!r.ok) throw new Error(data.error || 'Failed to analyze food');
      const view = await renderCards(data, 'web');
      addAssistantHtml(view.html);
    }catch(e){
      addAssistantError((e && e.message) || GENERIC_ERROR);
    }finally{
      setLoading(false);
      scrollToBottom();
    }
  }

  input.addEventListener('input', () => {
    input.style.height = 'auto';
    input.style.height = Math.min(input.scrollHeight, 200) + 'px';
    send.disabled = isLoading || !input.value.trim();
  });
  input.addEventListener('keydown', (e) => {
    if(e.key === 'Enter' && !e.shiftKey){ e.preventDefault(); submit(); }
  });
  document.getElementById('form').addEventListener('submit', (e) => { e.preventDefault(); submit(); });
</script>
</body>
</html>
"""

WIDGET_HTML = r"""<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <style>
__CARD_CSS__
  .widget-root { overflow-y:auto; }
  .widget-main { max-width:56rem; margin:0 auto; padding:12px 0; }
  .widget-main .meal-list > * + * { margin-top:16px; }
  </style>
</head>
<body>
  <div id="root" class="widget-root">
    <main id="main" class="widget-main"></main>
  </div>
<script>
  const API_BASE = __API_BASE__;
__TOGGLE_JS__

  const main = document.getElementById('main');
  let renderSeq = 0;

  function applyMaxHeight(){
    const h = window.openai && window.openai.maxHeight;
    document.getElementById('root').style.maxHeight = h ? h + 'px' : '';
  }

  async function render(){
    applyMaxHeight();
    const seq = ++renderSeq;
    const output = window.openai ? window.openai.toolOutput : null;
    try{
      const view = await renderCards(output === undefined ? null : output, 'widget');
      if(seq !== renderSeq) return;
      main.innerHTML = view.html;
      wireCards(main);
    }catch(e){
      if(seq !== renderSeq) return;
      main.innerHTML = '';
      const box = document.createElement('div');
      box.className = 'error-panel';
      const p = document.createElement('p');
      p.textContent = (e && e.message) || 'Failed to analyze food. Please try again.';
      box.appendChild(p);
      main.appendChild(box);
    }
  }

  // The host pushes new globals (toolOutput, maxHeight) through this event.
  window.addEventListener('openai:set_globals', render, {passive: true});
  render();
</script>
</body>
</html>
"""


def _fill(template: str, api_base: str) -> str:
    return (
        template.replace("__CARD_CSS__", CARD_CSS)
        .replace("__TOGGLE_JS__", TOGGLE_JS)
        .replace("__API_BASE__", json.dumps(api_base).replace("</", "<\\/"))
    )


def web_page(api_base: str = "") -> str:
    return _fill(WEB_HTML, api_base)


def widget_page(api_base: str = "") -> str:
    """Widget markup. Inside the host iframe relative URLs do not reach us, so
    `api_base` must be this deployment's absolute origin there."""
    return _fill(WIDGET_HTML, api_base)
