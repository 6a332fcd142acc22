"""Single-page gallery UI that consumes the view API."""

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

router = APIRouter(tags=["page"])


@router.get("/", response_class=HTMLResponse)
async def gallery_page() -> HTMLResponse:
    """Minimal gallery page polling ``/api/view``."""
    return HTMLResponse(_GALLERY_HTML)


_GALLERY_HTML = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>What's the Best Picture of Harley?</title>
    <style>
      body { font-family: ui-sans-serif, system-ui, sans-serif; margin: 2rem; }
      .grid { display: flex; flex-wrap: wrap; gap: 1rem; }
      .card { width: 220px; }
      .card img { width: 220px; height: 220px; object-fit: cover; }
      .overlay { position: fixed; inset: 0; background: rgba(0,0,0,0.6);
                 display: flex; align-items: center; justify-content: center; }
      .popup { background: #fff; padding: 2rem; border-radius: 8px; }
      .notice { color: #b00; }
    </style>
  </head>
  <body>
    <h1>What's the Best Picture of Harley?</h1>
    <p>Vote for your favorite picture of Harley! You can vote once per day per picture.</p>
    <p class="notice" id="notice"></p>
    <main class="grid" id="pictures">Loading Harley's pictures...</main>
    <section id="stats"></section>
    <div id="overlay"></div>
    <script>
      function img(src, fallback, alt) {
        return `<img src="${src}" alt="${alt}" onerror="this.onerror=null;this.src='${fallback}'" />`;
      }

      function render(view) {
        document.getElementById('notice').textContent = view.notice || '';
        const grid = document.getElementById('pictures');
        if (view.loading) { grid.textContent = "Loading Harley's pictures..."; return; }
        if (view.empty) { grid.textContent = 'No pictures found!'; }
        else {
          grid.innerHTML = view.pictures.map(p => `
            <div class="card">
              ${img(p.image_url, p.fallback_url, 'Harley ' + p.number)}
              <h3>Picture #${p.number} (${p.votes} votes)</h3>
              <button ${p.voting ? 'disabled' : ''} onclick="vote(${p.id})">
                ${p.voting ? 'Voting...' : 'Vote for this Harley!'}
              </button>
            </div>`).join('');
        }
        const stats = document.getElementById('stats');
        if (!view.stats) { stats.innerHTML = ''; }
        else {
          const leader = view.stats.leader
            ? `<p>Current Leader: Picture #${view.stats.leader.number} (${view.stats.leader.votes} votes)</p>` : '';
          stats.innerHTML = `<h2>Top 3 Most Loved Pictures of Harley</h2>
            <p>Total Votes: ${view.stats.total_votes}</p>
            <p>Total Pictures: ${view.stats.total_pictures}</p>${leader}
            ${view.stats.top_three.map(e =>
              `<p>${e.medal} Picture #${e.number}: ${e.votes} votes (${e.percentage}%)</p>`).join('')}`;
        }
        const overlay = document.getElementById('overlay');
        if (!view.overlay) { overlay.innerHTML = ''; }
        else if (view.overlay.kind === 'thank_you') {
          overlay.innerHTML = `<div class="overlay"><div class="popup">
            <h2>Thank You for Voting!</h2>
            <p>You voted for Picture #${view.overlay.number}</p>
            ${img(view.overlay.image_url, '', 'Voted Harley')}</div></div>`;
        } else {
          overlay.innerHTML = `<div class="overlay"><div class="popup">
            <h2>Current Leaderboard</h2>
            ${view.overlay.entries.map(e =>
              `<p>${e.medal} Picture #${e.number}: ${e.votes} votes (${e.percentage}%)</p>`).join('')}
            <p>Keep voting to change the rankings!</p></div></div>`;
        }
      }

      async function refresh() {
        const res = await fetch('/api/view');
        if (res.ok) { render(await res.json()); }
      }

      async function vote(id) {
        const res = await fetch('/api/vote/' + id, { method: 'POST' });
        if (!res.ok) {
          const body = await res.json();
          alert(body.detail || 'Failed to record vote');
        }
        await refresh();
      }

      refresh();
      setInterval(refresh, 500);
    </script>
  </body>
</html>
"""
