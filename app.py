"""
Web application for the Cart-Pole Balancing Simulation

Interactive dashboard to run an episode and chart its history.
"""

from typing import Any, Dict, Optional

import dash
from dash import dcc, html, Input, Output, State
from dash.exceptions import PreventUpdate
import numpy as np
import plotly.graph_objs as go

from cartpole.analysis import EpisodeAnalyzer
from cartpole.episode import EpisodeResult, run_episode
from cartpole.logger import setup_logging
from cartpole.params import SimulationConfig, validate_config
from cartpole.policies import POLICIES, make_policy

DEFAULTS = SimulationConfig()

# (input id, config field, label, min, max, step)
PARAMETER_INPUTS = [
    ("gravity-input", "gravity", "Gravity (m/s²)", 1.0, 20.0, 0.1),
    ("force-input", "force_mag", "Force Magnitude (N)", 1.0, 50.0, 1.0),
    ("pole-mass-input", "pole_mass", "Pole Mass (kg)", 0.05, 2.0, 0.05),
    ("pole-length-input", "pole_length", "Pole Half-Length (m)", 0.1, 2.0, 0.1),
    ("max-steps-input", "max_steps", "Max Steps", 100, 2000, 100),
    ("tau-input", "tau", "Physics Timestep (s)", 0.001, 0.05, 0.001),
]

LABEL_STYLE = {'fontWeight': 'bold', 'marginBottom': '5px'}


def _parameter_input(input_id: str, field: str, label: str, lo: float, hi: float, step: float) -> html.Div:
    return html.Div([
        html.Label(label, style=LABEL_STYLE),
        dcc.Input(
            id=input_id,
            type='number',
            value=getattr(DEFAULTS, field),
            min=lo,
            max=hi,
            step=step,
            style={'width': '100%', 'padding': '8px'}
        ),
    ], style={'width': '15%', 'display': 'inline-block', 'marginRight': '1.5%'})


app = dash.Dash(__name__)
app.title = "Cart-Pole Balancing Simulation"

app.layout = html.Div([
    html.Div([
        html.H1("Cart-Pole Balancing Simulation",
                style={'textAlign': 'center', 'marginBottom': '30px'}),

        html.Div([
            html.Div([_parameter_input(*spec) for spec in PARAMETER_INPUTS],
                     style={'marginBottom': '20px'}),

            html.Div([
                html.Label("Policy:", style=LABEL_STYLE),
                dcc.Dropdown(
                    id='policy-input',
                    options=[{'label': name, 'value': name} for name in sorted(POLICIES)],
                    value='lean',
                    clearable=False,
                ),
            ], style={'width': '25%', 'display': 'inline-block', 'marginRight': '20px',
                      'verticalAlign': 'top'}),

            html.Div([
                html.Label("Seed:", style=LABEL_STYLE),
                dcc.Input(id='seed-input', type='number', value=0, step=1,
                          style={'width': '100%', 'padding': '8px'}),
            ], style={'width': '15%', 'display': 'inline-block', 'marginRight': '20px',
                      'verticalAlign': 'top'}),

            html.Button('Run Episode', id='run-button',
                        style={'width': '20%', 'padding': '10px', 'fontSize': '16px',
                               'backgroundColor': '#4CAF50', 'color': 'white',
                               'border': 'none', 'borderRadius': '5px', 'cursor': 'pointer'})
        ], style={'marginBottom': '30px', 'padding': '20px', 'backgroundColor': '#f5f5f5',
                  'borderRadius': '10px'}),

        html.Div(id='status-message', style={'marginBottom': '20px', 'fontSize': '14px'}),

        dcc.Loading(
            id="loading",
            type="default",
            children=[
                html.Div(id='results-container')
            ]
        )
    ], style={'maxWidth': '1400px', 'margin': '0 auto', 'padding': '20px'})
])


@app.callback(
    [Output("results-container", "children"), Output("status-message", "children")],
    [Input("run-button", "n_clicks")],
    [State(spec[0], "value") for spec in PARAMETER_INPUTS]
    + [State("policy-input", "value"), State("seed-input", "value")],
)
def update_results(n_clicks: Optional[int], *values: Any) -> tuple[Any, Any]:
    """Run an episode and update results"""
    if n_clicks is None:
        raise PreventUpdate

    *parameter_values, policy_name, seed = values
    overrides = {
        spec[1]: value
        for spec, value in zip(PARAMETER_INPUTS, parameter_values)
        if value is not None
    }

    try:
        config = SimulationConfig.from_dict({**DEFAULTS.to_dict(), **overrides})
        problems = validate_config(config)
        if problems:
            return [], html.Div(
                "Error: " + "; ".join(problems),
                style={"color": "red"},
            )

        seed = int(seed) if seed is not None else None
        result = run_episode(make_policy(policy_name, seed), config, rng=seed)
        analysis = EpisodeAnalyzer(config).analyze(result)

        status_msg = html.Div(
            analysis["message"],
            style={"color": "green" if analysis["success"] else "red", "fontWeight": "bold"},
        )
        return create_results_layout(result, analysis, config), status_msg

    except ValueError as e:
        return [], html.Div(f"Error: {e}", style={"color": "red"})


def create_results_layout(
    result: EpisodeResult, analysis: Dict[str, Any], config: SimulationConfig
) -> html.Div:
    """Create the episode visualization layout"""
    steps = result.steps

    # 1. Pole angle with failure thresholds
    fig1 = go.Figure()
    fig1.add_trace(
        go.Scatter(
            x=steps,
            y=result.theta * 180 / np.pi,
            mode="lines",
            name="Pole angle",
            line=dict(color="#d97706", width=2),
            hovertemplate="Step: %{x}<br>Angle: %{y:.2f}°<extra></extra>",
        )
    )
    for limit in (config.theta_threshold_degrees, -config.theta_threshold_degrees):
        fig1.add_hline(y=limit, line_dash="dash", line_color="#ffcccc")
    fig1.update_layout(
        title="Pole Angle Over Steps",
        xaxis_title="Step",
        yaxis_title="Angle (degrees)",
        hovermode="closest",
        height=400,
        template="plotly_white",
    )

    # 2. Cart position with track limits
    fig2 = go.Figure()
    fig2.add_trace(
        go.Scatter(
            x=steps,
            y=result.x,
            mode="lines",
            name="Cart position",
            line=dict(color="#4f46e5", width=2),
            hovertemplate="Step: %{x}<br>Position: %{y:.3f}m<extra></extra>",
        )
    )
    for limit in (config.x_threshold, -config.x_threshold):
        fig2.add_hline(y=limit, line_dash="dash", line_color="#ef4444")
    fig2.update_layout(
        title="Cart Position Over Steps",
        xaxis_title="Step",
        yaxis_title="Position (m)",
        hovermode="closest",
        height=400,
        template="plotly_white",
    )

    # 3. Action trace
    fig3 = go.Figure()
    fig3.add_trace(
        go.Scatter(
            x=steps,
            y=result.actions,
            mode="lines",
            line=dict(color="#f59e0b", width=2, shape="hv"),
            name="Action",
            hovertemplate="Step: %{x}<br>Push: %{y}<extra></extra>",
        )
    )
    fig3.update_layout(
        title="Applied Force Direction (-1 left, +1 right)",
        xaxis_title="Step",
        yaxis_title="Direction",
        height=300,
        template="plotly_white",
    )

    summary_rows = [
        ("Termination", analysis["terminated_code"]),
        ("Steps", analysis["steps"]),
        ("Duration (s)", f"{analysis['duration_s']:.2f}"),
        ("Max Cart Offset (m)", f"{analysis['x_max']:.3f}"),
        ("Max Pole Angle (deg)", f"{analysis['theta_max_deg']:.2f}"),
        ("RMS Pole Angle (deg)", f"{analysis['theta_rms_deg']:.2f}"),
        ("Right Pushes (%)", f"{analysis['right_fraction']*100:.1f}"),
        ("Action Switches", analysis["action_switches"]),
    ]
    table_rows = [html.Tr([html.Th("Metric"), html.Th("Value")])]
    table_rows += [html.Tr([html.Td(name), html.Td(value)]) for name, value in summary_rows]

    return html.Div([
        html.H2("Episode Results", style={"marginTop": "30px", "marginBottom": "20px"}),
        html.Div([
            html.H3("Summary Table", style={"marginBottom": "15px"}),
            html.Table(
                table_rows,
                style={
                    "width": "50%",
                    "borderCollapse": "collapse",
                    "marginBottom": "30px",
                    "fontSize": "14px",
                },
            ),
        ], style={"marginBottom": "30px"}),
        html.Div([
            html.Div([dcc.Graph(figure=fig1)], style={"marginBottom": "30px"}),
            html.Div([dcc.Graph(figure=fig2)], style={"marginBottom": "30px"}),
            html.Div([dcc.Graph(figure=fig3)], style={"marginBottom": "30px"}),
        ]),
    ])


if __name__ == "__main__":
    setup_logging("INFO")
    app.run(debug=True, port=8050)
